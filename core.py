from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Callable, Iterable, List, Optional, Tuple
import heapq
import json
import logging
import math
import os
import re

logger = logging.getLogger("prizepicker.core")


# =========================
# Global constants (the GUI and CLI use these)
# =========================
DEFAULT_GPA_THRESHOLD = 4.0
DEFAULT_MAX_RECIPIENTS = 5
DEFAULT_CONFIG_PATH = "prize_config.json"

SOURCE_SAMPLE = "sample"


# =========================
# Data structures
# =========================
@dataclass(frozen=True)
class Student:
    name: str
    gpa: float

    def __post_init__(self) -> None:
        name = str(self.name).strip()
        if not name:
            raise ValueError("Student name must not be empty.")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "gpa", float(self.gpa))

    def __str__(self) -> str:
        return f"{self.name} (GPA: {self.gpa})"


@dataclass
class PrizeSettings:
    gpa_threshold: float = DEFAULT_GPA_THRESHOLD
    max_recipients: int = DEFAULT_MAX_RECIPIENTS


@dataclass
class PrizeSummary:
    winners: List[Student]
    alphabetical: List[Student]
    eligible_count: int
    gpa_threshold: float = DEFAULT_GPA_THRESHOLD
    max_recipients: int = DEFAULT_MAX_RECIPIENTS


@dataclass
class LoadResult:
    students: List[Student]
    source: str = SOURCE_SAMPLE
    notices: List[str] = field(default_factory=list)

    @property
    def used_sample(self) -> bool:
        return self.source == SOURCE_SAMPLE


# =========================
# Built-in sample (Heidi sits exactly on the threshold)
# =========================
SAMPLE_STUDENTS: Tuple[Student, ...] = (
    Student("Alice", 4.50),
    Student("Bob", 3.90),
    Student("Charlie", 4.20),
    Student("David", 4.80),
    Student("Eve", 4.10),
    Student("Frank", 3.50),
    Student("Grace", 4.70),
    Student("Heidi", 4.00),
    Student("Ivan", 4.35),
    Student("Judy", 3.80),
)


def load_sample() -> List[Student]:
    return list(SAMPLE_STUDENTS)


# =========================
# Parsing: name,gpa / name<TAB>gpa / name gpa
# =========================
_COMMA_RE = re.compile(r"\s*,\s*")


def split_line(line: str) -> List[str]:
    if "," in line:
        parts = _COMMA_RE.split(line)
    elif "\t" in line:
        parts = line.split("\t")
    else:
        parts = line.split()

    # "Alice," is one field, not a name plus an empty GPA
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def parse_gpa(s: str) -> float:
    """float() minus what a plain decimal GPA never is: '1_0', inf, nan."""
    s = s.strip()
    if "_" in s:
        raise ValueError(f"not a GPA: {s!r}")
    value = float(s)
    if not math.isfinite(value):
        raise ValueError(f"not a finite GPA: {s!r}")
    return value


def is_numeric(s: str) -> bool:
    try:
        parse_gpa(s)
    except ValueError:
        return False
    return True


def parse_lines(lines: Iterable[str]) -> List[Student]:
    """
    Turn raw text lines into students, in input order.

    - blank lines and '#' comments are ignored
    - rows with fewer than two fields are dropped silently
    - the first row whose GPA field is not a number is taken as the header
      (once per call); later ones are logged and skipped
    - rows whose name is empty after trimming are dropped
    """
    out: List[Student] = []
    header_skipped = False

    for lineno, raw in enumerate(lines, start=1):
        if raw is None:
            continue
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = split_line(line)
        if len(parts) < 2:
            continue

        if not header_skipped and not is_numeric(parts[1]):
            header_skipped = True
            logger.debug("Skipping header row (line %d): %s", lineno, line)
            continue

        name = parts[0].strip()
        try:
            gpa = parse_gpa(parts[1])
        except ValueError:
            logger.warning("Skipping bad GPA row (line %d): %s", lineno, line)
            continue

        if not name:
            logger.debug("Skipping row without a name (line %d): %s", lineno, line)
            continue
        out.append(Student(name, gpa))

    return out


def read_student_file(path: str) -> List[Student]:
    # utf-8-sig: spreadsheet exports often start with a BOM
    with open(path, "r", encoding="utf-8-sig") as f:
        lines = f.read().splitlines()
    students = parse_lines(lines)
    logger.info("Loaded %d student(s) from %s", len(students), path)
    return students


# =========================
# Data source selection with fallback to the sample
# =========================
def resolve_students(
    use_file: bool,
    select_path: Optional[Callable[[], Optional[str]]] = None,
    read: Callable[[str], List[Student]] = read_student_file,
) -> LoadResult:
    """
    Always resolves to a non-empty record set.
    Cancelled selection, unreadable file and zero parsed rows all fall back
    to the built-in sample with a notice.
    """
    if not use_file or select_path is None:
        return LoadResult(students=load_sample())

    path = select_path()
    if not path:
        return _fallback("No file selected (cancelled). Falling back to built-in sample.")

    try:
        students = read(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Reading %s failed: %s", path, e)
        return _fallback(f"Failed to read file {path}. Using built-in sample.")

    if not students:
        return _fallback("No rows loaded (cancelled or empty). Falling back to built-in sample.")

    return LoadResult(students=students, source=str(path))


def _fallback(notice: str) -> LoadResult:
    logger.info(notice)
    return LoadResult(students=load_sample(), notices=[notice])


# =========================
# Eligibility + ranking
# =========================
def is_eligible(student: Student, threshold: float = DEFAULT_GPA_THRESHOLD) -> bool:
    return student.gpa > threshold


def eligible_students(students: Iterable[Student], threshold: float = DEFAULT_GPA_THRESHOLD) -> List[Student]:
    return [s for s in students if is_eligible(s, threshold)]


def eligible_count(students: Iterable[Student], threshold: float = DEFAULT_GPA_THRESHOLD) -> int:
    return sum(1 for s in students if is_eligible(s, threshold))


def rank_top(
    students: Iterable[Student],
    max_recipients: int = DEFAULT_MAX_RECIPIENTS,
    threshold: float = DEFAULT_GPA_THRESHOLD,
) -> List[Student]:
    """Highest GPA first; equal GPAs keep load order."""
    if max_recipients < 0:
        raise ValueError(f"max_recipients must be >= 0, got {max_recipients}")
    return heapq.nlargest(max_recipients, eligible_students(students, threshold), key=lambda s: s.gpa)


def alphabetical(students: Iterable[Student], threshold: float = DEFAULT_GPA_THRESHOLD) -> List[Student]:
    return sorted(eligible_students(students, threshold), key=lambda s: s.name.lower())


def summarize(students: List[Student], settings: Optional[PrizeSettings] = None) -> PrizeSummary:
    if settings is None:
        settings = PrizeSettings()
    threshold = settings.gpa_threshold
    return PrizeSummary(
        winners=rank_top(students, settings.max_recipients, threshold),
        alphabetical=alphabetical(students, threshold),
        eligible_count=eligible_count(students, threshold),
        gpa_threshold=threshold,
        max_recipients=settings.max_recipients,
    )


# =========================
# Config file: read / write
# =========================
def validate_settings(gpa_threshold, max_recipients) -> PrizeSettings:
    try:
        threshold = float(gpa_threshold)
    except (TypeError, ValueError):
        raise ValueError(f"gpa_threshold must be a number, got {gpa_threshold!r}")

    # bool is an int subclass; 2.5 would silently truncate
    bad_type = isinstance(max_recipients, bool) or (
        isinstance(max_recipients, float) and not max_recipients.is_integer()
    )
    try:
        cap = int(max_recipients)
    except (TypeError, ValueError, OverflowError):
        bad_type = True
    if bad_type:
        raise ValueError(f"max_recipients must be an integer, got {max_recipients!r}")
    if cap < 0:
        raise ValueError(f"max_recipients must be >= 0, got {cap}")

    return PrizeSettings(gpa_threshold=threshold, max_recipients=cap)


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> PrizeSettings:
    """
    - config missing: write one with the defaults
    - config present: read it, missing keys fall back to the defaults
    """
    if not os.path.exists(path):
        save_settings(path, PrizeSettings())
        logger.info("Created default config at %s", path)

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a JSON object.")

    return validate_settings(
        data.get("gpa_threshold", DEFAULT_GPA_THRESHOLD),
        data.get("max_recipients", DEFAULT_MAX_RECIPIENTS),
    )


def save_settings(path: str, settings: PrizeSettings) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(settings), f, ensure_ascii=False, indent=2)
