# postgen/orchestrator.py
import asyncio
from typing import Optional

from postgen.config import Config, config
from postgen.errors import ProviderError
from postgen.features.cover.service import CoverResolutionClient
from postgen.features.post_text.service import TextGenerationClient
from postgen.logger import get_logger
from postgen.progress import ProgressSimulator
from postgen.schemas import GenerationRequest, GenerationResult, ProgressState

log = get_logger(__name__)


class OrchestratorBusy(RuntimeError):
    """A generation is already in flight."""


class GenerationOrchestrator:
    """
    Runs one generation at a time: text first, then the cover.

    All state lives on a single event loop, so the busy flag needs no lock.
    The progress timer is stopped and the flag cleared on every exit path.
    """

    def __init__(
        self,
        text_client: Optional[TextGenerationClient] = None,
        cover_client: Optional[CoverResolutionClient] = None,
        progress: Optional[ProgressSimulator] = None,
        *,
        cfg: Config = config,
    ):
        self.text_client = text_client or TextGenerationClient(cfg=cfg)
        self.cover_client = cover_client or CoverResolutionClient(cfg=cfg)
        self.progress = progress or ProgressSimulator(cfg=cfg)
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def progress_state(self) -> ProgressState:
        return self.progress.state

    async def generate(self, req: GenerationRequest) -> GenerationResult:
        if self._busy:
            raise OrchestratorBusy("a generation is already running")
        self._busy = True
        log.info(f"generation started: topic={req.topic!r} style={req.style} length={req.length} cover={req.cover_mode}")
        try:
            self.progress.start()
            post = await self.text_client.generate_text(req)

            # template covers come from the text call's summary; no cover stage
            if req.cover_mode != "template":
                self.progress.enter_cover_stage()
            cover = await self.cover_client.resolve_cover(req, post)

            self.progress.complete()
            log.info(f"generation done: cover={cover.kind}")
            return GenerationResult(post=post, cover=cover)
        except asyncio.CancelledError:
            # caller went away (e.g. client disconnect); there is no abort of the remote call itself
            self.progress.fail()
            raise
        except ProviderError as e:
            self.progress.fail()
            log.error(f"generation failed ({e.kind.value}): {e.raw_message}")
            raise
        except Exception as e:
            self.progress.fail()
            err = ProviderError.from_exception(e)
            log.exception(f"generation failed unexpectedly ({err.kind.value})")
            raise err from e
        finally:
            self.progress.cancel_timer()
            self._busy = False

    def close(self) -> None:
        self.progress.close()
