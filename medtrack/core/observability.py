import json
import logging
import threading
import time
import uuid
from collections import defaultdict
from typing import DefaultDict

from fastapi import Request
from jose import jwt
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger("medtrack.observability")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class MetricsRegistry:
    """In-process counters rendered in the Prometheus text format."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests_total = 0
        self.errors_5xx_total = 0
        self.denied_total = 0
        self.duration_ms_sum = 0.0

        self.requests_by_route: DefaultDict[tuple[str, str, int], int] = defaultdict(int)
        self.duration_sum_by_route: DefaultDict[tuple[str, str], float] = defaultdict(float)

    def observe(self, method: str, path: str, status_code: int, duration_ms: float, include_global: bool = True) -> None:
        with self._lock:
            if include_global:
                self.requests_total += 1
                self.duration_ms_sum += duration_ms
                if status_code >= 500:
                    self.errors_5xx_total += 1
                if status_code == 403:
                    self.denied_total += 1
            self.requests_by_route[(path, method, status_code)] += 1
            self.duration_sum_by_route[(path, method)] += duration_ms

    def render_prometheus(self) -> str:
        lines: list[str] = []
        with self._lock:
            for name, kind, help_text, value in (
                ("medtrack_http_requests_total", "counter", "HTTP requests processed.", self.requests_total),
                ("medtrack_http_errors_5xx_total", "counter", "HTTP 5xx responses.", self.errors_5xx_total),
                ("medtrack_access_denied_total", "counter", "Requests rejected with 403.", self.denied_total),
                ("medtrack_http_duration_ms_sum", "counter", "Sum of request durations in ms.", f"{self.duration_ms_sum:.3f}"),
            ):
                lines.append(f"# HELP {name} {help_text}")
                lines.append(f"# TYPE {name} {kind}")
                lines.append(f"{name} {value}")

            lines.append("# HELP medtrack_http_requests_by_route HTTP requests split by route, method and status.")
            lines.append("# TYPE medtrack_http_requests_by_route counter")
            for (path, method, status_code), count in sorted(self.requests_by_route.items()):
                lines.append(
                    f'medtrack_http_requests_by_route{{path="{_escape_label(path)}",method="{method}",status="{status_code}"}} {count}'
                )

            lines.append("# HELP medtrack_http_duration_ms_by_route_sum Sum of duration per route/method.")
            lines.append("# TYPE medtrack_http_duration_ms_by_route_sum counter")
            for (path, method), total in sorted(self.duration_sum_by_route.items()):
                lines.append(
                    f'medtrack_http_duration_ms_by_route_sum{{path="{_escape_label(path)}",method="{method}"}} {total:.3f}'
                )

        return "\n".join(lines) + "\n"


def _subject_from_auth(request: Request) -> str | None:
    auth = request.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        return None
    token = auth[7:].strip()
    if not token:
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except Exception:
        return None
    sub = claims.get("sub")
    return str(sub) if sub else None


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, registry: MetricsRegistry, exclude_paths: set[str] | None = None) -> None:
        super().__init__(app)
        self.registry = registry
        self.exclude_paths = exclude_paths or set()

    def _record(self, request: Request, request_id: str, status_code: int, started: float) -> dict:
        duration_ms = (time.perf_counter() - started) * 1000.0
        path = request.url.path
        self.registry.observe(
            method=request.method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            include_global=(path not in self.exclude_paths),
        )
        return {
            "event": "http_request",
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 3),
            "client_ip": request.client.host if request.client else None,
            "subject": _subject_from_auth(request),
        }

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(json.dumps(self._record(request, request_id, 500, started), ensure_ascii=False))
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(json.dumps(self._record(request, request_id, response.status_code, started), ensure_ascii=False))
        return response
