"""Standards documents, a fake fetcher and recording collaborators for tests."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ccss_import.hierarchy.errors import FetchError
from ccss_import.importer.models import (
    CompetencyRecord,
    CreatedCompetency,
    CreatedFramework,
    FrameworkRecord,
)
from ccss_import.importer.store import InMemoryStore, StoreValidationError

ORIGIN = "http://corestandards.org"
MATH_ROOT = f"{ORIGIN}/Math/"
MATH_CONTENT = f"{ORIGIN}/Math/Content/"
MATH_K = f"{ORIGIN}/Math/Content/K/"
MATH_K_CC = f"{ORIGIN}/Math/Content/K/CC/"
MATH_K_CC_A = f"{ORIGIN}/Math/Content/K/CC/A/"
MATH_K_CC_A_1 = f"{ORIGIN}/Math/Content/K/CC/A/1/"
MATH_K_CC_A_2 = f"{ORIGIN}/Math/Content/K/CC/A/2/"

SCALE_ID = 2
SCALE_CONFIGURATION = '[{"scaleid":"2"},{"id":1,"scaledefault":1,"proficient":0},{"id":2,"scaledefault":0,"proficient":1}]'


def item_xml(
    ref_uri: str | None,
    statements: Sequence[str] = (),
    codes: Sequence[str] = (),
    grades: Sequence[str] = (),
) -> str:
    """One LearningStandardItem element as the CCSS documents lay it out."""
    parts = ["<LearningStandardItem>"]
    if ref_uri is not None:
        parts.append(f"<RefURI>{ref_uri}</RefURI>")
    if codes:
        parts.append("<StatementCodes>")
        parts.extend(f"<StatementCode>{code}</StatementCode>" for code in codes)
        parts.append("</StatementCodes>")
    if statements:
        parts.append("<Statements>")
        parts.extend(f"<Statement>{statement}</Statement>" for statement in statements)
        parts.append("</Statements>")
    if grades:
        parts.append("<GradeLevels>")
        parts.extend(f"<GradeLevel>{grade}</GradeLevel>" for grade in grades)
        parts.append("</GradeLevels>")
    parts.append("</LearningStandardItem>")
    return "".join(parts)


def document_xml(*items: str, namespace: str | None = None) -> str:
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<LearningStandards{xmlns}>{''.join(items)}</LearningStandards>"
    )


def math_document(namespace: str | None = None) -> str:
    """Math root, one cluster and two standards; Content, K and K/CC are missing."""
    return document_xml(
        item_xml(MATH_ROOT, ["Mathematics Standards"], ["CCSS.Math"]),
        item_xml(
            MATH_K_CC_A_1,
            ["Count to 100 by ones and by tens."],
            ["CCSS.Math.Content.K.CC.A.1"],
            ["K"],
        ),
        item_xml(
            MATH_K_CC_A_2,
            ["Count forward beginning from a given number.", "Do not start at 1."],
            ["CCSS.Math.Content.K.CC.A.2", "K.CC.2"],
            ["K", "1"],
        ),
        item_xml(MATH_K_CC_A, ["Know number names and the count sequence."], ["CCSS.Math.Content.K.CC.A"]),
        namespace=namespace,
    )


def page(heading: str) -> str:
    return f"<html><head><title>x</title></head><body><h1>{heading}</h1><p>Body</p></body></html>"


MATH_PAGES = {
    MATH_CONTENT: page("Mathematics Standards Content"),
    MATH_K: page("Kindergarten"),
    MATH_K_CC: page("Counting &amp; Cardinality"),
}


class FakeFetcher:
    """Serves canned pages and records every URI requested."""

    def __init__(self, pages: dict[str, str] | None = None):
        self.pages = dict(pages or {})
        self.calls: list[str] = []

    def __call__(self, uri: str) -> str:
        self.calls.append(uri)
        if uri not in self.pages:
            raise FetchError(uri, f"Failed to fetch {uri}: 404 Not Found")
        return self.pages[uri]


class RecordingStore(InMemoryStore):
    """In-memory store that logs calls and can reject chosen idnumbers."""

    def __init__(self, reject_frameworks: Iterable[str] = (), reject_competencies: Iterable[str] = ()):
        super().__init__()
        self.reject_frameworks = set(reject_frameworks)
        self.reject_competencies = set(reject_competencies)
        self.framework_calls: list[FrameworkRecord] = []
        self.competency_calls: list[CompetencyRecord] = []

    def create_framework(self, record: FrameworkRecord) -> CreatedFramework:
        self.framework_calls.append(record)
        if record.idnumber in self.reject_frameworks:
            raise StoreValidationError(f"Framework '{record.idnumber}' is invalid")
        return super().create_framework(record)

    def create_competency(self, record: CompetencyRecord) -> CreatedCompetency:
        self.competency_calls.append(record)
        if record.idnumber in self.reject_competencies:
            raise StoreValidationError(f"Competency '{record.idnumber}' is invalid")
        return super().create_competency(record)

    def id_of(self, idnumber: str) -> int:
        for competency_id, competency in self.competencies.items():
            if competency.idnumber == idnumber:
                return competency_id
        raise KeyError(idnumber)


class RecordingProgress:
    """Progress sink that records every call."""

    def __init__(self):
        self.events: list[tuple] = []

    def start(self, label: str, total_ticks: int) -> None:
        self.events.append(("start", label, total_ticks))

    def tick(self) -> None:
        self.events.append(("tick",))

    def end(self) -> None:
        self.events.append(("end",))

    def ticks(self) -> int:
        return sum(1 for event in self.events if event[0] == "tick")


