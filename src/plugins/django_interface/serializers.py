# =========================================================
# Serializers de saída sobre as *views* do core (dataclasses),
# não sobre os modelos Django. Campos em camelCase no fio.
# =========================================================
from rest_framework import serializers


# ───────────────────────────────────────────────
# Pacientes
# ───────────────────────────────────────────────
class PatientSerializer(serializers.Serializer):
    id             = serializers.UUIDField()
    firstName      = serializers.CharField(source="first_name")
    lastName       = serializers.CharField(source="last_name")
    fullName       = serializers.CharField(source="full_name")
    dateOfBirth    = serializers.DateField(source="date_of_birth")
    age            = serializers.IntegerField()
    lastDiagnosis  = serializers.CharField(source="last_diagnosis", allow_null=True)
    createdAt      = serializers.DateTimeField(source="created_at")
    updatedAt      = serializers.DateTimeField(source="updated_at", allow_null=True)
    version        = serializers.IntegerField()


# ───────────────────────────────────────────────
# Resultados diagnósticos
# ───────────────────────────────────────────────
class DiagnosticResultSerializer(serializers.Serializer):
    id             = serializers.UUIDField()
    patientId      = serializers.UUIDField(source="patient_id")
    diagnosis      = serializers.CharField()
    notes          = serializers.CharField(allow_null=True)
    timestampUtc   = serializers.DateTimeField(source="timestamp_utc")
    createdAt      = serializers.DateTimeField(source="created_at")
    isActive       = serializers.BooleanField(source="is_active")
    patient        = PatientSerializer(allow_null=True, required=False)


class PatientDetailSerializer(PatientSerializer):
    diagnosticResults = DiagnosticResultSerializer(source="diagnostic_results", many=True)


# ───────────────────────────────────────────────
# Envelope de paginação (forma única para listagens)
# ───────────────────────────────────────────────
class PageInfoSerializer(serializers.Serializer):
    hasNextPage     = serializers.BooleanField(source="has_next_page")
    hasPreviousPage = serializers.BooleanField(source="has_previous_page")
    startCursor     = serializers.CharField(source="start_cursor", allow_null=True)
    endCursor       = serializers.CharField(source="end_cursor", allow_null=True)


class PaginationEnvelopeSerializer(serializers.Serializer):
    nodes       = serializers.ListField(child=serializers.DictField())
    totalCount  = serializers.IntegerField(source="total_count")
    pageInfo    = PageInfoSerializer(source="page_info")
    currentPage = serializers.IntegerField(source="current_page")
    totalPages  = serializers.IntegerField(source="total_pages")


class PatientEnvelopeSerializer(PaginationEnvelopeSerializer):
    nodes = PatientSerializer(many=True)


class DiagnosticResultEnvelopeSerializer(PaginationEnvelopeSerializer):
    nodes = DiagnosticResultSerializer(many=True)


# ───────────────────────────────────────────────
# Autenticação
# ───────────────────────────────────────────────
class TokenRequestSerializer(serializers.Serializer):
    username = serializers.CharField(trim_whitespace=True)
    password = serializers.CharField(trim_whitespace=False)

    def validate_password(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.")
        return value
