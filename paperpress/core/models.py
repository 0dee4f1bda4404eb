"""Data models for PaperPress."""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class Author:
    """A paper author.

    Attributes:
        name: Display name, e.g. "Doe, Jane"
        affiliation: Institution (optional)
        orcid: ORCID identifier without the URL prefix (optional)
    """

    name: str
    affiliation: Optional[str] = None
    orcid: Optional[str] = None

    def to_creator(self) -> Dict[str, str]:
        """Convert to a Zenodo creator entry."""
        creator = {"name": self.name}
        if self.affiliation:
            creator["affiliation"] = self.affiliation
        if self.orcid:
            creator["orcid"] = self.orcid
        return creator

    @classmethod
    def parse(cls, text: str) -> "Author":
        """Parse ``"Name|Affiliation|ORCID"`` (trailing parts optional)."""
        parts = [p.strip() for p in text.split("|")]
        return cls(
            name=parts[0],
            affiliation=parts[1] if len(parts) > 1 and parts[1] else None,
            orcid=parts[2] if len(parts) > 2 and parts[2] else None,
        )


@dataclass
class PaperSource:
    """A web source the model grounded its answer on."""

    uri: str
    title: Optional[str] = None


@dataclass
class GeneratedPaper:
    """A generated LaTeX paper and the sources behind it."""

    title: str
    latex: str
    sources: List[PaperSource] = field(default_factory=list)


@dataclass
class AnalysisItem:
    """Score and advice for one review criterion."""

    topic_num: int
    score: float
    improvement: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topicNum": self.topic_num,
            "score": self.score,
            "improvement": self.improvement,
        }


@dataclass
class AnalysisResult:
    """Structured review of a paper.

    Attributes:
        items: One entry per review criterion
    """

    items: List[AnalysisItem] = field(default_factory=list)

    def weak_points(self, threshold: float = 8.5) -> List[AnalysisItem]:
        """Items scoring below ``threshold``."""
        return [item for item in self.items if item.score < threshold]

    @property
    def average_score(self) -> float:
        if not self.items:
            return 0.0
        return sum(item.score for item in self.items) / len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {"analysis": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Create from the ``{"analysis": [...]}`` JSON shape returned by the model."""
        items = [
            AnalysisItem(
                topic_num=int(entry["topicNum"]),
                score=float(entry["score"]),
                improvement=str(entry.get("improvement", "")),
            )
            for entry in data.get("analysis", [])
        ]
        return cls(items=items)
