import logging
from typing import Optional, Sequence

from bs4 import BeautifulSoup, ParserRejectedMarkup

from unilite.utils import mask_session
from unilite.vars import ORIGIN_BASE_URL
from .document import assemble_document
from .steps import DEFAULT_STEPS, TransformContext, TransformStep

logger = logging.getLogger("uvicorn.error")

PARSER = "html.parser"


class HtmlTransformPipeline:
    """
    Turns origin markup into a minimal, proxy-routed document.

    The steps run in order over one parsed tree; the last working subtree is
    serialised into the fixed document shell. Has no side effects beyond the
    returned string.
    """

    def __init__(
        self,
        steps: Sequence[TransformStep] = DEFAULT_STEPS,
        base_url: str = ORIGIN_BASE_URL,
    ):
        self.steps = tuple(steps)
        self.base_url = base_url

    def transform(
        self,
        raw_html: str,
        session_id: Optional[str],
        base_url: Optional[str] = None,
    ) -> str:
        try:
            document = BeautifulSoup(raw_html or "", PARSER)
        except ParserRejectedMarkup as e:
            logger.warning(f"[Transform] Parser rejected markup, returning empty document: {e}")
            return assemble_document("")

        ctx = TransformContext(
            document=document,
            session_id=session_id or "",
            base_url=base_url or self.base_url,
        )
        root = document
        for step in self.steps:
            root = step(root, ctx)

        content = root.decode_contents()
        logger.debug(
            mask_session(
                f"[Transform] {len(raw_html or '')} -> {len(content)} chars for session {session_id}",
                session_id,
            )
        )
        return assemble_document(content)


_default_pipeline = HtmlTransformPipeline()


def transform(raw_html: str, session_id: Optional[str], base_url: Optional[str] = None) -> str:
    return _default_pipeline.transform(raw_html, session_id, base_url=base_url)
