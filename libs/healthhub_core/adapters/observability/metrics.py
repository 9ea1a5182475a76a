from prometheus_client import Counter, Histogram

# Registrados no registry padrão: expostos em /metrics/ pelo django-prometheus.
CQRS_MESSAGES = Counter(
    "healthhub_cqrs_messages_total",
    "Comandos/queries despachados pelos buses",
    ["kind", "name", "outcome"],
)

CQRS_DURATION = Histogram(
    "healthhub_cqrs_duration_seconds",
    "Tempo de execucao dos handlers CQRS",
    ["kind", "name"],
)

QUERY_CACHE = Counter(
    "healthhub_query_cache_total",
    "Resultado das leituras do cache de queries",
    ["result"],
)
