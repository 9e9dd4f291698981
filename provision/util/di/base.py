"""Provider base with swappable component slots."""

from typing import ClassVar, Literal, get_args

from dishka import Provider

Component = Literal["notifier", "persistence"]
COMPONENTS: frozenset[Component] = frozenset(get_args(Component))


class ProviderBase(Provider):
    """Provider for one slice of the object graph.

    A provider that names a ``slot`` is abstract: its subclasses fill that
    slot, one production implementation and one mock. Providers without a
    slot are used as they are.
    """

    slot: ClassVar[Component | None] = None
    is_mock: ClassVar[bool] = False

    @classmethod
    def implementation(cls, mock: bool = False) -> type["ProviderBase"]:
        if cls.slot is None:
            return cls

        for impl in cls.__subclasses__():
            if impl.is_mock == mock:
                return impl

        kind = "mock" if mock else "production"
        raise LookupError(f"No {kind} provider registered for {cls.slot}")
