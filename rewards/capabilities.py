"""
External capabilities used by the reward flow.

The game never talks to a wallet or a social network itself. The caller
hands in two callables:

    request_funds(token, amount) -> transaction reference
    post_announcement(text)      -> confirmation

Each call is made at most once per decision, with an optional deadline.
Any failure (exception, timeout, missing callable, empty reference) comes
back as ExternalCapabilityError.
"""

import secrets
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .config import RewardConfig


class ExternalCapabilityError(Exception):
    """A funding or announcement call failed, timed out, or isn't available."""

    def __init__(self, capability: str, reason: str):
        self.capability = capability
        self.reason = reason
        super().__init__(f"{capability} failed: {reason}")


# Keys a funding result may use for its transaction reference
REFERENCE_KEYS = ("transaction_hash", "transactionHash", "transactionReference", "reference")

# Marks "no deadline given here"; the caller's RewardConfig decides
CONFIG_TIMEOUT = object()


def call_with_deadline(fn: Callable, *args, timeout: Optional[float] = None, name: str = "capability"):
    """
    Call fn(*args), giving up after `timeout` seconds.

    The call runs on a daemon thread. On timeout the thread is abandoned
    (Python threads can't be killed) and ExternalCapabilityError is raised.
    A stalled call never holds up interpreter exit.
    Exceptions from fn propagate unchanged.
    """
    if timeout is None:
        return fn(*args)

    outcome = {}

    def run():
        try:
            outcome["value"] = fn(*args)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=run, name=name, daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise ExternalCapabilityError(name, f"no response after {timeout}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def extract_reference(result: Any) -> Optional[str]:
    """
    Pull a transaction reference out of whatever request_funds returned.

    Accepts a plain string, a mapping, or an object with one of the
    REFERENCE_KEYS as an attribute.
    """
    if result is None:
        return None
    if isinstance(result, str):
        return result.strip() or None
    for key in REFERENCE_KEYS:
        if isinstance(result, Mapping):
            value = result.get(key)
        else:
            value = getattr(result, key, None)
        if value:
            return str(value)
    return None


@dataclass
class Capabilities:
    """
    The pair of external capabilities the reward flow may use.
    Either may be None when the deployment doesn't provide it.

    `timeout` left unset means the deadline comes from the RewardConfig the
    caller passes in. Set it (None for no deadline) to pin it for this
    instance, e.g. from the --timeout flag.
    """
    request_funds: Optional[Callable[[str, str], Any]] = None
    post_announcement: Optional[Callable[[str], Any]] = None
    timeout: Any = CONFIG_TIMEOUT

    def _deadline(self, timeout: Any) -> Optional[float]:
        if self.timeout is not CONFIG_TIMEOUT:
            return self.timeout
        if timeout is not CONFIG_TIMEOUT:
            return timeout
        return RewardConfig.CAPABILITY_TIMEOUT_S

    def fund(self, token: str, amount: str, timeout: Any = CONFIG_TIMEOUT) -> str:
        """
        Request funds once.

        Args:
            token: Token symbol, e.g. "usdc".
            amount: Amount as a decimal string.
            timeout: Deadline in seconds from the caller's RewardConfig.
                Ignored when this instance has its own timeout.

        Returns:
            The transaction reference.

        Raises:
            ExternalCapabilityError: on any failure.
        """
        if self.request_funds is None:
            raise ExternalCapabilityError("request_funds", "Couldn't find the faucet tool.")

        try:
            result = call_with_deadline(
                self.request_funds, token, amount,
                timeout=self._deadline(timeout), name="request_funds"
            )
        except ExternalCapabilityError:
            raise
        except Exception as e:
            raise ExternalCapabilityError("request_funds", str(e) or type(e).__name__) from e

        reference = extract_reference(result)
        if reference is None:
            raise ExternalCapabilityError("request_funds", "no transaction reference returned")
        return reference

    def announce(self, text: str, timeout: Any = CONFIG_TIMEOUT) -> Any:
        """
        Post an announcement once.

        Returns:
            Whatever confirmation the capability returned.

        Raises:
            ExternalCapabilityError: on any failure.
        """
        if self.post_announcement is None:
            raise ExternalCapabilityError("post_announcement", "Couldn't find the tweet posting tool.")

        try:
            return call_with_deadline(
                self.post_announcement, text,
                timeout=self._deadline(timeout), name="post_announcement"
            )
        except ExternalCapabilityError:
            raise
        except Exception as e:
            raise ExternalCapabilityError("post_announcement", str(e) or type(e).__name__) from e


def simulated_capabilities() -> Capabilities:
    """
    Capabilities that only print what they would do.
    Used by `main.py --simulate`, like the hardware-free simulate modes.
    """
    def request_funds(token: str, amount: str) -> str:
        reference = "0x" + secrets.token_hex(32)
        print(f"[SIM] Faucet: sending {amount} {token} -> {reference}")
        return reference

    def post_announcement(text: str) -> dict:
        print(f"[SIM] Posting announcement:\n{text}")
        return {"id": secrets.token_hex(8), "text": text}

    return Capabilities(request_funds=request_funds, post_announcement=post_announcement)
