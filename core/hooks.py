"""
Named filter/action hooks.

Features register callbacks against a hook name at process start and the
host pipeline runs them at well-known points:

    upload_prefilter   UploadRequest        before an upload is persisted
    attachment_url     (url, media_id)      when an attachment URL is built
    attachment_link    (link, media_id)     when an attachment link is built
    activate_<plugin>  (session, ...)       once, when a plugin is activated
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_PRIORITY = 10


@dataclass(frozen=True)
class Hook:
    """A registered callback"""
    callback: Callable[..., Any]
    priority: int = DEFAULT_PRIORITY
    accepted_args: int = 1


class HookRegistry:
    """
    Registry of filters and actions keyed by hook name.

    Callbacks run in ascending priority; callbacks sharing a priority run
    in registration order.
    """

    def __init__(self):
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def add_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        """
        Attach a callback to a hook. Registering the same callback twice at
        the same priority replaces the earlier registration.
        """
        self.remove_filter(hook_name, callback, priority)
        self._hooks[hook_name].append(
            Hook(callback=callback, priority=priority, accepted_args=accepted_args)
        )

    def remove_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        registered = self._hooks.get(hook_name, [])
        remaining = [
            hook for hook in registered
            if not (hook.callback == callback and hook.priority == priority)
        ]
        if len(remaining) == len(registered):
            return False
        self._hooks[hook_name] = remaining
        return True

    def has_filter(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool:
        registered = self._hooks.get(hook_name, [])
        if callback is None:
            return bool(registered)
        return any(hook.callback == callback for hook in registered)

    def _ordered(self, hook_name: str) -> list[Hook]:
        # sorted() is stable, so registration order holds within a priority
        return sorted(self._hooks.get(hook_name, []), key=lambda hook: hook.priority)

    def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        """
        Pass value through every callback attached to hook_name.
        Each callback receives the current value plus up to
        accepted_args - 1 of the extra arguments.
        """
        for hook in self._ordered(hook_name):
            value = hook.callback(value, *args[:max(hook.accepted_args - 1, 0)])
        return value

    # Actions share storage with filters; only the return value differs
    add_action = add_filter
    remove_action = remove_filter
    has_action = has_filter

    def do_action(self, hook_name: str, *args: Any) -> None:
        for hook in self._ordered(hook_name):
            hook.callback(*args[:hook.accepted_args])

    def register_activation_hook(
        self,
        plugin: str,
        callback: Callable[..., Any],
        accepted_args: int = 1,
    ) -> None:
        """Bind callback to run when plugin is activated"""
        self.add_action(f"activate_{plugin}", callback, accepted_args=accepted_args)

    def activate(self, plugin: str, *args: Any) -> None:
        self.do_action(f"activate_{plugin}", *args)


# Process-wide registry, populated during application startup
hooks = HookRegistry()
