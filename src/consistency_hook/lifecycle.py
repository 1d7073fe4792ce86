"""Post-release lifecycle: an ordered list of zero-argument callbacks."""

import logging
from typing import Any, Callable, List, Optional, Tuple

from consistency_hook.config import ReleaseConfig
from consistency_hook.errors import ConfigError
from consistency_hook.hook import ConsistencyHook
from consistency_hook.process import Runner, run_command

logger = logging.getLogger(__name__)

HOOK_KINDS = {"format"}


def _hook_name(fn: Callable[[], Any]) -> str:
    return getattr(fn, "__name__", None) or type(fn).__name__


class PostReleaseHooks:
    """Callbacks run once, in order, after release assets are written."""

    def __init__(self):
        self._hooks: List[Callable[[], Any]] = []

    def register(self, fn: Callable[[], Any]) -> Callable[[], Any]:
        self._hooks.append(fn)
        return fn

    def __len__(self) -> int:
        return len(self._hooks)

    def run_all(self) -> List[Tuple[str, Any]]:
        """
        Call every hook in registration order.

        A hook that raises is logged and skipped; later hooks still run
        and the release is not failed.
        """
        results = []
        for fn in self._hooks:
            name = _hook_name(fn)
            logger.debug("Running post-release hook %s", name)
            try:
                results.append((name, fn()))
            except Exception as e:
                logger.warning("Post-release hook %s failed: %s", name, e)
                results.append((name, None))
        return results


def build_post_release_hooks(
    release_config: ReleaseConfig,
    runner: Runner = run_command,
    cwd: Optional[str] = None,
    **overrides: Any,
) -> PostReleaseHooks:
    """Create the configured post-release hooks. Unknown kinds are a ConfigError."""
    hooks = PostReleaseHooks()
    for entry in release_config.post_release:
        kind = entry.get("kind")
        if kind not in HOOK_KINDS:
            raise ConfigError(f"Unknown post-release hook kind: {kind}")
        config = release_config.hook_config(entry, **overrides)
        hooks.register(ConsistencyHook(config=config, runner=runner, cwd=cwd))
    return hooks
