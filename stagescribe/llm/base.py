"""Base classes and shared utilities for message generators."""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, TypeVar

from stagescribe.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODELS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    CallShape,
    LLMProvider,
)
from stagescribe.credentials import missing_key_message
from stagescribe.llm.exceptions import (
    GenerationError,
    GenerationErrorKind,
    MissingAPIKeyError,
)
from stagescribe.models import GeneratedMessage, Prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")

# How often a cancellable call checks its cancel event (seconds)
CANCEL_POLL_INTERVAL = 0.05


def run_cancellable(
    call: Callable[[], T],
    cancel_event: Optional[threading.Event] = None,
    on_cancel: Optional[Callable[[], None]] = None,
    poll_interval: float = CANCEL_POLL_INTERVAL,
) -> T:
    """Run a blocking call that the caller can cancel.

    Without a cancel event the call runs on the current thread. With one,
    it runs on a single worker thread while this thread polls the event.
    Setting the event, or interrupting with Ctrl-C, invokes on_cancel (which
    should abort the in-flight request) and raises a CANCELLED error.

    Raises:
        GenerationError: With kind CANCELLED when cancelled.
        Exception: Whatever the call itself raises.
    """
    if cancel_event is None:
        try:
            return call()
        except KeyboardInterrupt:
            if on_cancel:
                on_cancel()
            raise GenerationError("Generation was cancelled", kind=GenerationErrorKind.CANCELLED)

    if cancel_event.is_set():
        raise GenerationError(
            "Generation was cancelled before the request was sent",
            kind=GenerationErrorKind.CANCELLED,
        )

    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(call)
    try:
        while True:
            try:
                done, _ = wait([future], timeout=poll_interval, return_when=FIRST_COMPLETED)
            except KeyboardInterrupt:
                cancel_event.set()
                done = set()
            if done:
                return future.result()
            if cancel_event.is_set():
                future.cancel()
                if on_cancel:
                    on_cancel()
                raise GenerationError("Generation was cancelled", kind=GenerationErrorKind.CANCELLED)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def classify_sdk_error(error: Exception, sdk: Any) -> GenerationErrorKind:
    """Map an exception from an OpenAI-style SDK (openai, anthropic, groq) to a kind.

    Args:
        error: The exception raised by the client.
        sdk: The SDK module exposing the standard exception classes.
    """
    # APITimeoutError subclasses APIConnectionError, so check it first
    if isinstance(error, sdk.APITimeoutError):
        return GenerationErrorKind.TIMEOUT
    if isinstance(error, sdk.APIConnectionError):
        return GenerationErrorKind.NETWORK
    if isinstance(error, (sdk.AuthenticationError, sdk.PermissionDeniedError)):
        return GenerationErrorKind.AUTHENTICATION
    if isinstance(error, sdk.RateLimitError):
        return GenerationErrorKind.RATE_LIMIT
    return GenerationErrorKind.REMOTE


def openai_style_usage(response: Any) -> tuple[int, int]:
    """Read (prompt, completion) token counts from an OpenAI-style response."""
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0, 0
    return (
        getattr(usage, "prompt_tokens", 0) or 0,
        getattr(usage, "completion_tokens", 0) or 0,
    )


def _close_client(client: Any) -> None:
    close = getattr(client, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as e:
        logger.debug("Closing client after cancellation failed: %s", e)


class BaseMessageGenerator(ABC):
    """Abstract base class for message generators.

    Subclasses bind one provider to one call shape. The only public
    operation is generate(); the subclass hooks build the SDK client, send
    the request and read candidate texts from the response.
    """

    provider: LLMProvider
    shape: CallShape
    display_name: str = "LLM"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the generator.

        Args:
            api_key: API key for the provider.
            model: The model to use. Defaults to the provider default for the call shape.
            max_tokens: Output token budget.
            temperature: Sampling temperature.
            timeout: Seconds to wait for the remote call.

        Raises:
            MissingAPIKeyError: If api_key is empty.
        """
        if not api_key:
            raise MissingAPIKeyError(missing_key_message(self.provider))
        self.api_key = api_key
        self.model = model or DEFAULT_MODELS[(self.provider, self.shape)]
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @abstractmethod
    def _create_client(self) -> Any:
        """Create the SDK client."""

    @abstractmethod
    def _send(self, client: Any, prompt_text: str) -> Any:
        """Issue the request and return the raw SDK response."""

    @abstractmethod
    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        """Return the candidate texts of a response, in order."""

    def _extract_usage(self, response: Any) -> tuple[int, int]:
        return 0, 0

    def _classify_error(self, error: Exception) -> GenerationErrorKind:
        return GenerationErrorKind.REMOTE

    def generate(
        self, prompt: Prompt, cancel_event: Optional[threading.Event] = None
    ) -> GeneratedMessage:
        """Generate a commit message for the prompt.

        Args:
            prompt: The composed prompt.
            cancel_event: Set it to abort the in-flight request.

        Returns:
            The GeneratedMessage with trimmed text.

        Raises:
            GenerationError: If the call fails, is cancelled, returns a
                malformed response or returns no candidates.
        """
        prompt_text = prompt.text
        logger.debug(
            "Sending %s request to %s model %s (%d chars)",
            self.shape.value, self.display_name, self.model, len(prompt_text),
        )

        client = None
        try:
            client = self._create_client()
            response = run_cancellable(
                lambda: self._send(client, prompt_text),
                cancel_event,
                on_cancel=lambda: _close_client(client),
            )
        except GenerationError:
            raise
        except Exception as e:
            kind = self._classify_error(e)
            raise GenerationError(f"{self.display_name} API call failed: {e}", kind=kind) from e

        try:
            candidates = self._extract_candidates(response)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise GenerationError(
                f"{self.display_name} returned a malformed response: {e}",
                kind=GenerationErrorKind.MALFORMED,
            ) from e

        if not candidates:
            raise GenerationError(
                f"{self.display_name} returned no candidates",
                kind=GenerationErrorKind.NO_CANDIDATES,
            )

        text = candidates[0]
        if not isinstance(text, str):
            raise GenerationError(
                f"{self.display_name} returned a candidate without text",
                kind=GenerationErrorKind.MALFORMED,
            )

        input_tokens, output_tokens = self._extract_usage(response)
        message = GeneratedMessage(
            text=text,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        logger.debug("Received %d chars (%d/%d tokens)", len(message.text), input_tokens, output_tokens)
        return message
