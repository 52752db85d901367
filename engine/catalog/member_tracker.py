"""
CodeAtlas Precise Member Reference Tracker.

Resolves references to class and interface members (methods,
properties, constructors) through the source model's exact resolution
instead of text matching.

Buckets are keyed by bare member name: two unrelated classes that both
declare ``save()`` share one bucket and both receive its references.
Interface members use their own bucket namespace so that direct usage
of an interface method is never attributed to implementing classes
before cross-linking. Set bucket_by_owner to partition buckets per
owning type instead.
Requires Python 3.11+.
"""

from catalog.contexts import classify_member_usage
from catalog.instrumentation import ScanMetrics
from catalog.models import Catalog, CodeLocation, MemberSymbol, Reference, Symbol, SymbolKind
from source_model.models import MemberKind
from source_model.typescript_model import TypeScriptSourceModel
from utils.logger import LoggerMixin

BucketKey = tuple[str, str, str]


class MemberReferenceTracker(LoggerMixin):
    """Tracks member references with one exact resolution query per member."""

    OWNER_KINDS = (SymbolKind.CLASS, SymbolKind.INTERFACE)

    def __init__(self, model: TypeScriptSourceModel, bucket_by_owner: bool = False) -> None:
        self._model = model
        self._bucket_by_owner = bucket_by_owner

    def track(
        self, files: list[str], catalog: Catalog, metrics: ScanMetrics | None = None
    ) -> None:
        """Resolve and attach references for every member of local classes and interfaces."""
        metrics = metrics if metrics is not None else ScanMetrics()
        scope = set(files)

        with metrics.phase("member_tracking") as phase:
            entries = self._collect_members(catalog, scope)
            phase.count("members", len(entries))

            buckets: dict[BucketKey, list[Reference]] = {}
            seen: dict[BucketKey, set[tuple[str, int, int]]] = {}

            for owner, member in entries:
                key = self._bucket_key(owner, member)
                bucket = buckets.setdefault(key, [])
                bucket_seen = seen.setdefault(key, set())

                try:
                    sites = self._model.resolve_exact_references(member.handle)
                except Exception as e:
                    self.log.warning(
                        "member_skipped",
                        symbol=f"{owner.name}.{member.name}",
                        path=member.location.file,
                        error=str(e),
                    )
                    phase.count("members_skipped")
                    continue

                for site in sites:
                    location = CodeLocation.from_source(site.location, with_end=False)
                    if location.key == member.location.key or location.key in bucket_seen:
                        continue
                    bucket_seen.add(location.key)
                    bucket.append(
                        Reference(
                            location=location,
                            context=classify_member_usage(site),
                            context_line=site.context_line,
                        )
                    )

            # Apply: each member gets its own copy of its bucket
            for owner, member in entries:
                bucket = buckets.get(self._bucket_key(owner, member), [])
                member.references = sorted(bucket, key=lambda r: r.sort_key)
                phase.count("references", member.reference_count)

        self.log.info(
            "member_tracking_complete",
            members=len(entries),
            buckets=len(buckets),
        )

    def _collect_members(
        self, catalog: Catalog, scope: set[str]
    ) -> list[tuple[Symbol, MemberSymbol]]:
        """Every (owner, member) pair of local classes and interfaces in scope."""
        entries = []
        for kind in self.OWNER_KINDS:
            for owner in catalog.local_symbols(kind):
                if owner.location is None or owner.location.file not in scope:
                    continue
                for member in owner.members:
                    if member.handle is not None:
                        entries.append((owner, member))
        return entries

    def _bucket_key(self, owner: Symbol, member: MemberSymbol) -> BucketKey:
        if self._bucket_by_owner:
            return (owner.id, member.kind.value, member.name)
        if member.kind == MemberKind.CONSTRUCTOR:
            return (owner.kind.value, "constructor", owner.id)
        return (owner.kind.value, member.kind.value, member.name)
