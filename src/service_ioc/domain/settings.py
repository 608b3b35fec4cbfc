from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from service_ioc.domain.enums import Lifetime


class ContainerSettings(BaseModel):
    """Configuration for a service container.

    Attributes:
        default_lifetime: Lifetime used when ``register`` is called without one.
        dispose_hooks: Method names tried, in order, to release an owned instance.
        thread_safe: Guard first-time construction with a re-entrant lock.
    """

    model_config = ConfigDict(frozen=True)

    default_lifetime: Lifetime = Field(
        default=Lifetime.TRANSIENT,
        description="Lifetime used when none is given at registration.",
    )
    dispose_hooks: Tuple[str, ...] = Field(
        default=("dispose", "close"),
        description="Method names looked up on instances at teardown.",
    )
    thread_safe: bool = Field(
        default=True,
        description="Whether singleton and scoped construction is lock-protected.",
    )

    @field_validator("dispose_hooks")
    @classmethod
    def _validate_dispose_hooks(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one dispose hook name is required")
        if any(not hook for hook in value):
            raise ValueError("dispose hook names must be non-empty")
        return value
