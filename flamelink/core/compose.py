"""Right-to-left composition of sync and async steps."""
import inspect
from typing import Any, Awaitable, Callable


def compose(*steps: Callable[[Any], Any]) -> Callable[[Any], Awaitable[Any]]:
    """Compose unary steps into one async pipeline.

    The last step runs first. Each step may return a value or an awaitable;
    results are awaited before the next step runs, and the first exception
    ends the pipeline.

    Usage:
        get_titles = compose(lambda value: pluck_fields(value, ["title"]), fetch)
        titles = await get_titles("/schemas")
    """
    async def pipeline(initial: Any) -> Any:
        result = initial
        for step in reversed(steps):
            result = step(result)
            if inspect.isawaitable(result):
                result = await result
        return result

    return pipeline
