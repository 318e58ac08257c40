"""Request Context Management.

contextvars-backed binding of request and user ids so every log line
emitted while serving a request (or a Streamlit rerun) carries them.
"""

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


_request_id_var: ContextVar[str] = ContextVar("request_id", default="")
_user_id_var: ContextVar[str] = ContextVar("user_id", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_request_id() -> str:
    """Generate a unique request ID using UUID4."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    return _request_id_var.get()


def get_user_id() -> str:
    return _user_id_var.get()


def get_context_dict() -> dict[str, Any]:
    """Get the bound context as a dictionary for log records."""
    ctx: dict[str, Any] = {}
    if _request_id_var.get():
        ctx["request_id"] = _request_id_var.get()
    if _user_id_var.get():
        ctx["user_id"] = _user_id_var.get()
    ctx.update(_extra_context_var.get())
    return ctx


@dataclass
class RequestContext:
    """Context manager binding request_id / user_id to log entries.

    Example:
        with RequestContext(user_id="user_1"):
            logger.info("closing trade")  # carries request_id and user_id
    """

    request_id: str = ""
    user_id: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    _tokens: list = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.request_id:
            self.request_id = generate_request_id()

    def __enter__(self) -> "RequestContext":
        self._tokens = [
            (_request_id_var, _request_id_var.set(self.request_id)),
            (_user_id_var, _user_id_var.set(self.user_id)),
            (_extra_context_var, _extra_context_var.set(dict(self.extra))),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()

    @property
    def elapsed_ms(self) -> float:
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the active context."""
        _extra_context_var.set({**_extra_context_var.get(), **kwargs})
        self.extra.update(kwargs)


def bind_user_id(user_id: str) -> None:
    """Bind a user id to the current context (e.g. once auth has resolved it)."""
    _user_id_var.set(user_id)
