# backend/src/busquedas/observability/logging_filters.py
import logging


class CorrelationIdLogFilter(logging.Filter):
    """
    Garantiza que el LogRecord tenga 'correlation_id' para que el formatter
    pueda usar %(correlation_id)s aunque no haya request en curso.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True
