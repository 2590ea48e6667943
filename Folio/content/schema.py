"""Portfolio content schema and the default document.

Every stored or transmitted document uses camelCase keys (``personalInfo``,
``avatarUrl``); Python code works with the snake_case attribute names.
Both spellings are accepted on input.

Two families of models live here:

- the complete models (``PortfolioDocument`` and its parts), where every
  field is always present;
- the partial models (``PartialPortfolioDocument`` and friends), where
  every field is optional and ``None`` means "not supplied".

Sequence elements (skills, experience, ...) have no partial variant: a
sequence is always replaced as a whole, so the complete element models are
shared. Their fields all carry defaults so that loosely shaped stored
elements still parse.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

logger = logging.getLogger("FOLIO.Schema")

SEQUENCE_FIELDS = ("skills", "experience", "education", "projects", "gallery")

SKILL_LEVEL_MIN = 0
SKILL_LEVEL_MAX = 100


class ContentModel(BaseModel):
    """Base model: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def null_as_default(cls, data: Any) -> Any:
        """A stored ``null`` means "use the field default"."""
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _dedupe_tags(tags: List[str]) -> List[str]:
    seen = set()
    unique = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            unique.append(tag)
    return unique


# Complete models

class SocialLinks(ContentModel):
    github: str = ""
    linkedin: str = ""
    twitter: str = ""
    instagram: str = ""


class Stats(ContentModel):
    """Display strings such as "3+"; never interpreted as numbers."""
    years_experience: str = ""
    projects_completed: str = ""
    certifications_awards: str = ""


class PersonalInfo(ContentModel):
    name: str = ""
    title: str = ""
    avatar_url: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    about: str = ""
    qr_code_url: str = ""
    social: SocialLinks = Field(default_factory=SocialLinks)
    stats: Stats = Field(default_factory=Stats)


class Skill(ContentModel):
    name: str = ""
    level: int = 0

    @field_validator("level", mode="before")
    @classmethod
    def round_level(cls, v: Any) -> Any:
        if v is None:
            return SKILL_LEVEL_MIN
        if isinstance(v, str):
            try:
                v = float(v.strip())
            except ValueError:
                return v
        if isinstance(v, float) and math.isfinite(v):
            return round(v)
        return v

    @field_validator("level")
    @classmethod
    def clamp_level(cls, v: int) -> int:
        return max(SKILL_LEVEL_MIN, min(SKILL_LEVEL_MAX, v))


class Experience(ContentModel):
    title: str = ""
    company: str = ""
    period: str = ""
    description: str = Field("", description="Rich text stored as HTML markup")
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: List[str]) -> List[str]:
        return _dedupe_tags(v)


class Education(ContentModel):
    degree: str = ""
    school: str = ""
    period: str = ""


class Project(ContentModel):
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    link: str = ""
    image_url: str = ""

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: List[str]) -> List[str]:
        return _dedupe_tags(v)


class GalleryItem(ContentModel):
    title: str = ""
    description: str = ""
    image_url: str = ""


class PortfolioDocument(ContentModel):
    """The single content aggregate rendered by the site."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    skills: List[Skill] = Field(default_factory=list)
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    gallery: List[GalleryItem] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PortfolioDocument":
        return cls.model_validate(dict(data))

    def as_partial(self) -> "PartialPortfolioDocument":
        return PartialPortfolioDocument.model_validate(self.to_dict())


# Partial models

class PartialSocialLinks(ContentModel):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None


class PartialStats(ContentModel):
    years_experience: Optional[str] = None
    projects_completed: Optional[str] = None
    certifications_awards: Optional[str] = None


class PartialPersonalInfo(ContentModel):
    name: Optional[str] = None
    title: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    qr_code_url: Optional[str] = None
    social: Optional[PartialSocialLinks] = None
    stats: Optional[PartialStats] = None


class PartialPortfolioDocument(ContentModel):
    """A portfolio document where any field, at any level, may be absent."""

    personal_info: Optional[PartialPersonalInfo] = None
    skills: Optional[List[Skill]] = None
    experience: Optional[List[Experience]] = None
    education: Optional[List[Education]] = None
    projects: Optional[List[Project]] = None
    gallery: Optional[List[GalleryItem]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Only the supplied fields, camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _find_key(node: Any, part: Any) -> Any:
    """Key in ``node`` for an error location part, given either spelling."""
    if not isinstance(node, dict):
        return None
    if part in node:
        return part
    if isinstance(part, str) and to_snake(part) in node:
        return to_snake(part)
    return None


def _prune_invalid(data: Dict[str, Any], loc: tuple) -> bool:
    """Remove the value an error location points at.

    Invalid scalar leaves are dropped individually. Anything inside a
    sequence invalidates the whole sequence, since sequences are never
    merged element by element. Returns False when nothing could be removed.
    """
    if not loc:
        return False
    if loc[0] in SEQUENCE_FIELDS:
        if loc[0] not in data:
            return False
        del data[loc[0]]
        return True

    node: Any = data
    for part in loc[:-1]:
        key = _find_key(node, part)
        if key is None:
            return False
        node = node[key]
    key = _find_key(node, loc[-1])
    if key is not None:
        del node[key]
        return True
    # The container itself has the wrong type; drop it from its parent.
    return _prune_invalid(data, loc[:-1])


def _plain(value: Any) -> Any:
    """Deep copy of nested dicts so pruning never touches the caller's data."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def coerce_partial(value: Any) -> Optional[PartialPortfolioDocument]:
    """Parse an untrusted value into a partial document.

    Returns None when the value is not an object at all. Invalid pieces
    are discarded so that the rest still merges over the defaults.
    """
    if isinstance(value, PartialPortfolioDocument):
        return value
    if isinstance(value, PortfolioDocument):
        return value.as_partial()
    if not isinstance(value, Mapping):
        return None

    data = _plain(value)
    # Each round removes at least one key, so this terminates.
    while True:
        try:
            return PartialPortfolioDocument.model_validate(data)
        except ValidationError as e:
            removed = False
            for error in e.errors():
                loc = tuple(error["loc"])
                if _prune_invalid(data, loc):
                    removed = True
                    logger.debug(f"Dropped invalid field {'.'.join(str(p) for p in loc)}: {error['msg']}")
            if not removed:
                logger.warning("Discarding unparseable portfolio document")
                return PartialPortfolioDocument()


def default_document() -> PortfolioDocument:
    """Return a fresh, fully populated default portfolio."""
    return PortfolioDocument(
        personal_info=PersonalInfo(
            name="Your Name",
            title="Software Developer",
            avatar_url="",
            email="your.email@example.com",
            phone="+1 234 567 8900",
            location="Your City, Country",
            about=(
                "I'm a passionate Software Developer with expertise in building modern web applications. \n"
                "I love creating elegant solutions to complex problems and am always eager to learn new technologies.\n"
                "\n"
                "With a strong foundation in both frontend and backend development, I strive to deliver \n"
                "high-quality, scalable solutions that make a real impact."
            ),
            qr_code_url="",
            social=SocialLinks(
                github="https://github.com/yourusername",
                linkedin="https://linkedin.com/in/yourusername",
                twitter="",
                instagram="",
            ),
            stats=Stats(
                years_experience="3+",
                projects_completed="15+",
                certifications_awards="5+",
            ),
        ),
        skills=[
            Skill(name="JavaScript", level=90),
            Skill(name="TypeScript", level=85),
            Skill(name="React", level=90),
            Skill(name="Next.js", level=80),
            Skill(name="Node.js", level=75),
            Skill(name="Python", level=70),
            Skill(name="SQL", level=75),
            Skill(name="Git", level=85),
        ],
        experience=[
            Experience(
                title="Software Developer",
                company="Company Name",
                period="2023 - Present",
                description="Developing and maintaining web applications using React and Node.js.",
            ),
            Experience(
                title="Junior Developer",
                company="Previous Company",
                period="2021 - 2023",
                description="Built responsive web interfaces and collaborated with cross-functional teams.",
            ),
        ],
        education=[
            Education(
                degree="Bachelor's in Computer Science",
                school="University Name",
                period="2017 - 2021",
            ),
        ],
        projects=[
            Project(
                title="Project One",
                description="A full-stack web application built with React and Node.js",
                tags=["React", "Node.js", "MongoDB"],
                link="#",
            ),
            Project(
                title="Project Two",
                description="Mobile-responsive e-commerce platform with payment integration",
                tags=["Next.js", "Stripe", "Tailwind"],
                link="#",
            ),
            Project(
                title="Project Three",
                description="Real-time chat application with WebSocket support",
                tags=["React", "Socket.io", "Express"],
                link="#",
            ),
        ],
        gallery=[
            GalleryItem(title="Gallery One", description="Creative snapshot"),
            GalleryItem(title="Gallery Two", description="Design moment"),
            GalleryItem(title="Gallery Three", description="Work in focus"),
        ],
    )
