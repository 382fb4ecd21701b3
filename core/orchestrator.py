# =============================================================================
# core/orchestrator.py  —  Resolving one ask into one CMS operation
# =============================================================================
#
# THE FLOW:
#
#   ask ──▶ move intent? ──yes──▶ destination? ──no──▶ clarification
#              │                       │yes
#              │                       └──▶ Move collaborator
#              no
#              ▼
#   explicit parent in ask?  (decides whether a snapshot is needed)
#              ▼
#   content types  ┐
#                  ├─ fetched concurrently (asyncio.gather)
#   snapshot       ┘  snapshot only when no explicit parent
#              ▼
#   best type ─▶ base type ─▶ parent (explicit > proposal) ─▶ fields ─▶ name
#              ▼
#   Create collaborator
#
# At most one state-changing call (create or move) happens per ask.  Every
# "not sure" branch returns a ClarificationResult instead of guessing.
# =============================================================================

import asyncio
import logging
from typing import Optional, Protocol, Sequence, Union

from core import content_types, parents, structure, text_signals
from core.config import DEFAULT_MATCHERS, MatcherConfig
from core.content_types import ORCHESTRATOR_CLASSIFIER, ContentTypeClassifier
from core.errors import ValidationError
from core.models import (
    ClarificationResult,
    ContentCreatePayload,
    ContentTypeDescriptor,
    DelegateResult,
    ParentLink,
    StructureSnapshot,
)

logger = logging.getLogger(__name__)

AskResult = Union[DelegateResult, ClarificationResult]

MOVE_DESTINATION_MISSING = "Move intent detected but destination parent not found."
NO_PARENT_FOUND = "Parent not provided and no suitable parents found."
CHOOSE_PARENT = (
    "Please choose a parent for the new content and ask again with "
    "'under parent <id>', or set autoSelectParent to use the top proposal."
)


class ContentTypeDirectory(Protocol):
    async def list_content_types(self) -> list[ContentTypeDescriptor]: ...


class ContentCreator(Protocol):
    async def create(self, payload: ContentCreatePayload) -> DelegateResult: ...


class ContentMover(Protocol):
    async def move(self, content_identifier: str, parent_link: ParentLink) -> DelegateResult: ...


class AskOrchestrator:
    """Sequences the extractors, scorers and CMS collaborators for one ask.

    Holds no state between calls; one instance can serve many asks.
    """

    def __init__(
        self,
        directory: ContentTypeDirectory,
        tree: structure.ContentTree,
        creator: ContentCreator,
        mover: ContentMover,
        root_resolver: Optional[structure.RootResolver] = None,
        matchers: MatcherConfig = DEFAULT_MATCHERS,
        classifier: ContentTypeClassifier = ORCHESTRATOR_CLASSIFIER,
        key_strategy: structure.KeyStrategy = structure.positional_key,
        default_root: str = structure.DEFAULT_ROOT,
    ):
        self.directory = directory
        self.tree = tree
        self.creator = creator
        self.mover = mover
        self.root_resolver = root_resolver
        self.matchers = matchers
        self.classifier = classifier
        self.key_strategy = key_strategy
        self.default_root = default_root

    @classmethod
    def for_client(cls, client, **options) -> "AskOrchestrator":
        """One client (e.g. core.cms_client.CmsClient) in every collaborator slot."""
        options.setdefault("default_root", client.settings.default_root)
        return cls(
            directory=client,
            tree=client,
            creator=client,
            mover=client,
            root_resolver=client,
            **options,
        )

    async def resolve(
        self,
        ask: str,
        discovery_root: Optional[str] = None,
        language: str = "en",
        status: str = "Published",
        auto_select_parent: bool = False,
        max_depth: int = 2,
        max_nodes: int = 50,
    ) -> AskResult:
        if not ask or not ask.strip():
            raise ValidationError("Parameter 'ask' is required.")
        if max_depth < 0:
            raise ValidationError("max_depth must be zero or greater.")
        if max_nodes < 1:
            raise ValidationError("max_nodes must be at least 1.")

        move = text_signals.extract_move_intent(ask, self.matchers)
        if move is not None:
            if move.parent_link is None:
                logger.info("Move of %s requested without a destination", move.content_identifier)
                return ClarificationResult(message=MOVE_DESTINATION_MISSING)
            logger.info("Moving %s under %s", move.content_identifier, move.parent_link.to_dict())
            return await self.mover.move(move.content_identifier, move.parent_link)

        # Explicit parent wins over any proposal, so it also decides
        # whether the tree needs fetching at all.
        explicit_parent = text_signals.extract_parent_reference(ask, self.matchers)
        types, snapshot = await self._gather_context(
            need_snapshot=explicit_parent is None,
            discovery_root=discovery_root,
            max_depth=max_depth,
            max_nodes=max_nodes,
        )

        best = content_types.resolve(ask, types, self.matchers)
        base_type = self.classifier.classify(best)

        if explicit_parent is not None:
            parent_link = explicit_parent
        else:
            proposals = parents.propose(snapshot, best, self.matchers)
            if not proposals:
                return ClarificationResult(message=NO_PARENT_FOUND, proposals=[])
            if not auto_select_parent:
                return ClarificationResult(message=CHOOSE_PARENT, proposals=proposals)
            parent_link = proposals[0].parent_link
            logger.info("Auto-selected parent %s (score %d)", proposals[0].identifier, proposals[0].score)

        payload = ContentCreatePayload(
            name=self._content_name(ask, best),
            language=language,
            content_type=(base_type, best.name),
            parent_link=parent_link,
            status=status,
            fields=text_signals.extract_field_assignments(ask, best.property_names, self.matchers),
        )
        logger.info("Creating %s %r under %s", best.name, payload.name, parent_link.to_dict())
        return await self.creator.create(payload)

    async def _gather_context(
        self,
        need_snapshot: bool,
        discovery_root: Optional[str],
        max_depth: int,
        max_nodes: int,
    ) -> tuple[Sequence[ContentTypeDescriptor], Optional[StructureSnapshot]]:
        if not need_snapshot:
            return await self.directory.list_content_types(), None

        types, snapshot = await asyncio.gather(
            self.directory.list_content_types(),
            structure.snapshot(
                self.tree,
                root=discovery_root,
                max_depth=max_depth,
                max_nodes=max_nodes,
                root_resolver=self.root_resolver,
                default_root=self.default_root,
                key_strategy=self.key_strategy,
            ),
        )
        return types, snapshot

    def _content_name(self, ask: str, best: ContentTypeDescriptor) -> str:
        # Quoted values consumed by "set X to '...'" are field values, not names.
        field_values = text_signals.extract_set_values(ask, self.matchers)
        for quoted in text_signals.extract_quoted_strings(ask, self.matchers):
            if quoted not in field_values:
                return quoted
        return best.display_name or best.name
