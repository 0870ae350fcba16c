import time
from functools import wraps

from medpass_core.adapters.observability.metrics import HTTP_LATENCY, HTTP_REQUESTS


def track_http(view_name: str | None = None):
    """
    Mede latência e conta respostas por status de uma action de ViewSet/APIView.
    Sem `view_name`, usa `<Classe>_<método>` da instância.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(self, request, *args, **kwargs):
            name = view_name or f"{type(self).__name__}_{fn.__name__}"
            start = time.perf_counter()
            status = "500"
            try:
                resp = fn(self, request, *args, **kwargs)
                status = str(getattr(resp, "status_code", 200))
                return resp
            finally:
                HTTP_LATENCY.labels(view=name).observe(time.perf_counter() - start)
                HTTP_REQUESTS.labels(view=name, status=status).inc()
        return wrapper
    return decorator
