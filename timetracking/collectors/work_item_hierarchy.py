"""
Work Item Hierarchy Resolution

Attributes logged time to the Feature that owns a work item:

    HierarchyCache       run-scoped map of work item id -> WorkItem
    WorkItemBatchFetcher fetches ids in batches of 200, 3 batches at a time
    FeatureResolver      walks the parent chain (max 5 steps) to the first Feature

A fresh cache is created for every aggregation run and discarded afterwards,
so nothing is shared between runs.

Usage:
    cache = HierarchyCache()
    fetcher = WorkItemBatchFetcher(client, project="MyProject")
    cache.update(await fetcher.fetch(referenced_ids))

    resolver = FeatureResolver(fetcher, cache)
    feature = await resolver.resolve(1002)
"""

from collections.abc import Iterable

from ..core import get_logger
from ..domain.constants import api_config, time_tracking
from ..domain.work_items import ResolvedFeature, WorkItem
from ..utils.batch_utils import chunked, run_batched
from .ado_rest_client import AzureDevOpsRESTClient
from .ado_rest_transformers import WorkItemTransformer

logger = get_logger(__name__)

WORK_ITEM_FIELDS = [
    "System.Title",
    "System.WorkItemType",
    "System.Parent",
    time_tracking.EXPENSE_FIELD,
]


class HierarchyCache:
    """
    In-memory work item store for a single aggregation run.

    Entries are write-once: put_if_absent and update never replace an item
    that is already cached.
    """

    def __init__(self) -> None:
        self._items: dict[int, WorkItem] = {}

    def get(self, work_item_id: int) -> WorkItem | None:
        return self._items.get(work_item_id)

    def contains(self, work_item_id: int) -> bool:
        return work_item_id in self._items

    def put_if_absent(self, item: WorkItem) -> WorkItem:
        """Cache item unless its id is already present; return the cached item."""
        return self._items.setdefault(item.id, item)

    def update(self, items: dict[int, WorkItem]) -> None:
        for item in items.values():
            self.put_if_absent(item)

    def __contains__(self, work_item_id: object) -> bool:
        return work_item_id in self._items

    def __len__(self) -> int:
        return len(self._items)


class WorkItemBatchFetcher:
    """Fetch work items in bounded-size batches with bounded concurrency."""

    def __init__(
        self,
        client: AzureDevOpsRESTClient,
        project: str,
        batch_size: int = api_config.WORK_ITEM_BATCH_SIZE,
        concurrency: int = api_config.WORK_ITEM_BATCH_CONCURRENCY,
    ):
        self.client = client
        self.project = project
        self.batch_size = batch_size
        self.concurrency = concurrency

    async def fetch(self, ids: Iterable[int]) -> dict[int, WorkItem]:
        """
        Fetch work items by id.

        Args:
            ids: Work item ids (duplicates are removed)

        Returns:
            Mapping of id to WorkItem; ids that do not exist upstream are absent

        Raises:
            AdoApiError: If any batch fails
        """
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return {}

        batches = chunked(unique_ids, self.batch_size)
        logger.info(f"Fetching {len(unique_ids)} work items in {len(batches)} batches")

        def fetch_batch(batch_ids: list[int]):
            async def run() -> list[WorkItem]:
                response = await self.client.get_work_items(batch_ids, WORK_ITEM_FIELDS, self.project)
                return WorkItemTransformer.transform_work_items_response(response)

            return run

        batch_results = await run_batched(
            [fetch_batch(batch) for batch in batches], concurrency=self.concurrency, logger=logger
        )

        items: dict[int, WorkItem] = {}
        for batch_items in batch_results:
            for item in batch_items:
                items[item.id] = item

        missing = len(unique_ids) - len(items)
        if missing:
            logger.debug(f"{missing} work items were not returned (deleted or inaccessible)")
        return items


class FeatureResolver:
    """
    Resolve a work item to the Feature that owns it.

    Walks parent links from the given item until a Feature is found, a parent
    is missing, an id repeats, or MAX_HIERARCHY_DEPTH items have been examined.
    Anything short of a Feature resolves to ResolvedFeature.none().

    Results are memoized per resolver, so one resolver must not outlive its run.
    """

    def __init__(
        self,
        fetcher: WorkItemBatchFetcher,
        cache: HierarchyCache,
        max_depth: int = time_tracking.MAX_HIERARCHY_DEPTH,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.max_depth = max_depth
        self._resolved: dict[int, ResolvedFeature] = {}

    async def _lookup(self, work_item_id: int) -> WorkItem | None:
        item = self.cache.get(work_item_id)
        if item is None:
            fetched = await self.fetcher.fetch([work_item_id])
            self.cache.update(fetched)
            item = self.cache.get(work_item_id)
        return item

    async def prefetch(self, work_item_ids: Iterable[int]) -> None:
        """Batch-fetch every id not yet cached, so later resolution mostly hits the cache."""
        missing = {i for i in work_item_ids if not self.cache.contains(i)}
        if missing:
            self.cache.update(await self.fetcher.fetch(missing))

    def cached_item(self, work_item_id: int) -> WorkItem | None:
        return self.cache.get(work_item_id)

    async def resolve(self, work_item_id: int) -> ResolvedFeature:
        """
        Find the Feature owning work_item_id.

        Args:
            work_item_id: Work item the time was logged on

        Returns:
            ResolvedFeature for the first Feature ancestor (or the item itself),
            or ResolvedFeature.none()

        Raises:
            AdoApiError: If fetching an uncached item fails
        """
        if work_item_id in self._resolved:
            return self._resolved[work_item_id]

        result = ResolvedFeature.none()
        current_id: int | None = work_item_id
        visited: set[int] = set()

        while current_id is not None and len(visited) < self.max_depth:
            if current_id in visited:
                logger.warning(f"Cycle in work item hierarchy at {current_id} (from {work_item_id})")
                break
            visited.add(current_id)

            item = await self._lookup(current_id)
            if item is None:
                break

            if item.is_feature:
                result = ResolvedFeature.from_feature(item)
                break

            current_id = item.parent_id

        self._resolved[work_item_id] = result
        return result
