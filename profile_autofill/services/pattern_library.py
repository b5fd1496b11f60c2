"""Immutable table of extraction rules and vocabularies shared by every classifier.

Loaded once at import; all tables are tuples or MappingProxyType so concurrent
scans can share one instance without copying.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, FrozenSet, Iterator, Optional, Tuple

from profile_autofill.schemas.field_mapping import FieldType, UploadKind
from profile_autofill.schemas.profile import SkillCategory
from profile_autofill.utils.date_parser import DATE_RANGE_RE, LOOSE_DATE_RANGE_RE, SINGLE_DATE_RE
from profile_autofill.utils.helpers import EMAIL_PATTERN, normalize_url, normalize_whitespace


class PatternCategory(str, Enum):
    """Tag of each rule variant; every variant carries its own normalizer."""

    EMAIL = "email"
    PHONE = "phone"
    LINKEDIN_URL = "linkedin_url"
    PORTFOLIO_URL = "portfolio_url"
    DATE_RANGE = "date_range"
    LOOSE_DATE_RANGE = "loose_date_range"
    SINGLE_DATE = "single_date"
    DEGREE = "degree"
    GPA = "gpa"
    HONORS = "honors"
    POSTAL_CODE = "postal_code"
    STREET = "street"
    CITY_STATE = "city_state"
    COUNTRY = "country"


Normalizer = Callable[["re.Match[str]"], Optional[str]]


@dataclass(frozen=True)
class PatternRule:
    """One regex matcher with its base confidence and normalizer (None rejects the match)."""

    category: PatternCategory
    matcher: "re.Pattern[str]"
    base_confidence: float
    normalize: Normalizer


@dataclass(frozen=True)
class PatternMatch:
    category: PatternCategory
    value: str
    confidence: float
    start: int
    end: int
    raw: str


@dataclass(frozen=True)
class Vocabulary:
    """Tokens per semantic target: compact attribute tokens, label synonyms, context keywords."""

    attribute_tokens: Tuple[str, ...]
    label_synonyms: Tuple[str, ...]
    context_keywords: Tuple[str, ...]


# ---- Normalizers ----

def _whole(m: "re.Match[str]") -> Optional[str]:
    return normalize_whitespace(m.group(0)) or None


def _lower(m: "re.Match[str]") -> Optional[str]:
    return m.group(0).strip().lower()


def _phone(m: "re.Match[str]") -> Optional[str]:
    raw = normalize_whitespace(m.group(0))
    digits = re.sub(r"\D", "", raw)
    if not 7 <= len(digits) <= 15:
        return None
    return raw


def _url(m: "re.Match[str]") -> Optional[str]:
    return normalize_url(m.group(0))


def _generic_url(m: "re.Match[str]") -> Optional[str]:
    raw = m.group(0)
    if "linkedin.com" in raw.lower():
        return None
    return normalize_url(raw)


_DEGREE_ABBREVIATIONS = MappingProxyType({
    "phd": "PhD",
    "dphil": "PhD",
    "mba": "Master of Business Administration",
    "bsc": "Bachelor of Science",
    "bs": "Bachelor of Science",
    "msc": "Master of Science",
    "ms": "Master of Science",
    "ba": "Bachelor of Arts",
    "ma": "Master of Arts",
    "beng": "Bachelor of Engineering",
    "meng": "Master of Engineering",
    "btech": "Bachelor of Technology",
    "mtech": "Master of Technology",
    "aa": "Associate of Arts",
    "as": "Associate of Science",
    "ged": "GED",
})


def _degree(m: "re.Match[str]") -> Optional[str]:
    raw = normalize_whitespace(m.group(0)).rstrip(".")
    key = re.sub(r"[^a-z]", "", raw.lower())
    if key in _DEGREE_ABBREVIATIONS:
        return _DEGREE_ABBREVIATIONS[key]
    if key.startswith(("doctorofphilosophy", "doctorate")):
        return "PhD"
    words = []
    for word in raw.split():
        lw = word.lower()
        words.append(lw if lw in ("of", "in", "and") else lw[:1].upper() + lw[1:])
    return " ".join(words)


def _gpa(m: "re.Match[str]") -> Optional[str]:
    value = float(m.group("value"))
    scale = m.group("scale")
    if scale:
        if value > float(scale) or float(scale) > 10:
            return None
        return f"{m.group('value')}/{scale}"
    if value > 4.0:
        return None
    return m.group("value")


def _city_state(m: "re.Match[str]") -> Optional[str]:
    city = normalize_whitespace(m.group("city"))
    state = normalize_whitespace(m.group("state"))
    if not city or len(city.split()) > 4:
        return None
    return f"{city}, {state}"


_COUNTRIES = MappingProxyType({
    "united states": "United States",
    "united states of america": "United States",
    "usa": "United States",
    "u.s.a.": "United States",
    "united kingdom": "United Kingdom",
    "uk": "United Kingdom",
    "england": "United Kingdom",
    "canada": "Canada",
    "australia": "Australia",
    "new zealand": "New Zealand",
    "ireland": "Ireland",
    "germany": "Germany",
    "france": "France",
    "spain": "Spain",
    "italy": "Italy",
    "netherlands": "Netherlands",
    "sweden": "Sweden",
    "switzerland": "Switzerland",
    "india": "India",
    "pakistan": "Pakistan",
    "singapore": "Singapore",
    "japan": "Japan",
    "china": "China",
    "brazil": "Brazil",
    "mexico": "Mexico",
    "south africa": "South Africa",
    "nigeria": "Nigeria",
    "united arab emirates": "United Arab Emirates",
    "uae": "United Arab Emirates",
})


def _country(m: "re.Match[str]") -> Optional[str]:
    return _COUNTRIES.get(m.group(0).lower())


def _rule(category: PatternCategory, pattern: str, confidence: float,
          normalize: Normalizer, flags: int = 0) -> PatternRule:
    return PatternRule(category, re.compile(pattern, flags), confidence, normalize)


_URL_TAIL = r"[A-Za-z0-9_.~%/-]*"

_RULES: Tuple[PatternRule, ...] = (
    _rule(PatternCategory.EMAIL, EMAIL_PATTERN, 0.95, _lower),
    _rule(
        PatternCategory.PHONE,
        r"(?<![\w/])(?:\+\d{1,3}[ \t.-]?)?(?:\(\d{2,4}\)[ \t.-]?|\d{2,4}[ \t.-])\d{3,4}[ \t.-]?\d{3,4}(?![\w/])",
        0.85,
        _phone,
    ),
    # Local numbers without area code ("555-1234")
    _rule(PatternCategory.PHONE, r"(?<![\w/+.-])\d{3}[-.]\d{4}(?![\w/-])", 0.5, _phone),
    _rule(
        PatternCategory.LINKEDIN_URL,
        r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/(?:in|pub)/[A-Za-z0-9_%-]+/?",
        0.9,
        _url,
        re.IGNORECASE,
    ),
    _rule(
        PatternCategory.PORTFOLIO_URL,
        r"(?:https?://)?(?:www\.)?(?:github\.com/[A-Za-z0-9_-]+|gitlab\.com/[A-Za-z0-9_-]+"
        r"|[A-Za-z0-9-]+\.(?:github\.io|netlify\.app|vercel\.app)|behance\.net/[A-Za-z0-9_-]+"
        r"|dribbble\.com/[A-Za-z0-9_-]+)" + _URL_TAIL,
        0.8,
        _url,
        re.IGNORECASE,
    ),
    _rule(
        PatternCategory.PORTFOLIO_URL,
        r"(?:https?://|www\.)[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+" + _URL_TAIL,
        0.6,
        _generic_url,
        re.IGNORECASE,
    ),
    PatternRule(PatternCategory.DATE_RANGE, DATE_RANGE_RE, 0.9, _whole),
    PatternRule(PatternCategory.LOOSE_DATE_RANGE, LOOSE_DATE_RANGE_RE, 0.5, _whole),
    PatternRule(PatternCategory.SINGLE_DATE, SINGLE_DATE_RE, 0.6, _whole),
    _rule(
        PatternCategory.DEGREE,
        r"\b(?:bachelor|master|doctor|associate)(?:'s|s)?(?:\s+degree)?"
        r"(?:\s+of\s+(?:business\s+administration|applied\s+science|fine\s+arts|science|arts"
        r"|engineering|technology|laws|education|philosophy|commerce))?\b"
        r"|\bdoctorate\b|\b(?:high\s+school\s+)?diploma\b|\bcertificate\b",
        0.85,
        _degree,
        re.IGNORECASE,
    ),
    # Abbreviations are only trusted in their usual capitalization
    _rule(
        PatternCategory.DEGREE,
        r"\b(?:Ph\.?\s?D|D\.?Phil|MBA|M\.B\.A|B\.?Sc|M\.?Sc|B\.S|M\.S|BS|MS|B\.A|M\.A|BA|MA"
        r"|B\.?Eng|M\.?Eng|B\.?Tech|M\.?Tech|A\.A|A\.S|GED)\b\.?",
        0.8,
        _degree,
    ),
    _rule(
        PatternCategory.GPA,
        r"\bGPA\s*:?\s*(?P<value>\d{1,2}(?:\.\d{1,2})?)(?:\s*/\s*(?P<scale>\d{1,2}(?:\.\d{1,2})?))?",
        0.9,
        _gpa,
        re.IGNORECASE,
    ),
    _rule(
        PatternCategory.GPA,
        r"(?P<value>\d\.\d{1,2})\s*/\s*(?P<scale>4(?:\.0{1,2})?|5(?:\.0{1,2})?|10(?:\.0)?)\b",
        0.7,
        _gpa,
    ),
    _rule(
        PatternCategory.HONORS,
        r"\b(?:summa\s+cum\s+laude|magna\s+cum\s+laude|cum\s+laude"
        r"|with\s+(?:high(?:est)?\s+)?(?:honou?rs|distinction)|first[-\s]class\s+honou?rs"
        r"|dean'?s\s+list|valedictorian|salutatorian)\b",
        0.85,
        _whole,
        re.IGNORECASE,
    ),
    _rule(
        PatternCategory.POSTAL_CODE,
        r"\b(?:\d{5}(?:-\d{4})?|[A-Z]\d[A-Z]\s?\d[A-Z]\d|[A-Z]{1,2}\d[A-Z\d]?\s\d[A-Z]{2})\b",
        0.7,
        _whole,
    ),
    _rule(
        PatternCategory.STREET,
        r"\b\d{1,6}[ \t]+(?:[A-Za-z0-9.'-]+[ \t]+){1,5}?(?:street|st|avenue|ave|road|rd|boulevard|blvd"
        r"|lane|ln|drive|dr|court|ct|way|place|pl|terrace|parkway|pkwy)\b\.?",
        0.75,
        _whole,
        re.IGNORECASE,
    ),
    _rule(
        PatternCategory.CITY_STATE,
        r"(?P<city>\b[A-Z][A-Za-z.'-]+(?: [A-Z][A-Za-z.'-]+){0,3}),[ \t]*"
        r"(?P<state>[A-Z]{2}|[A-Z][a-z]+(?: [A-Z][a-z]+)?)\b",
        0.7,
        _city_state,
    ),
    _rule(
        PatternCategory.COUNTRY,
        r"\b(?:" + "|".join(re.escape(c) for c in sorted(_COUNTRIES, key=len, reverse=True)) + r")(?![\w])",
        0.6,
        _country,
        re.IGNORECASE,
    ),
)


# ---- Form field vocabulary ----

FIELD_VOCABULARY = MappingProxyType({
    FieldType.FIRST_NAME: Vocabulary(
        ("firstname", "fname", "givenname", "forename", "namefirst", "userfirstname"),
        ("first name", "given name", "forename", "first given name"),
        ("first name", "given name"),
    ),
    FieldType.LAST_NAME: Vocabulary(
        ("lastname", "lname", "surname", "familyname", "namelast", "userlastname"),
        ("last name", "surname", "family name"),
        ("last name", "surname", "family name"),
    ),
    FieldType.EMAIL: Vocabulary(
        ("email", "emailaddress", "mail", "useremail", "contactemail"),
        ("email", "email address", "e mail", "e mail address", "mail"),
        ("email", "e mail"),
    ),
    FieldType.PHONE: Vocabulary(
        ("phone", "telephone", "tel", "mobile", "cell", "phonenumber", "mobilenumber",
         "cellphone", "contactnumber", "contactphone"),
        ("phone", "phone number", "telephone", "mobile", "mobile number", "cell phone",
         "contact number"),
        ("phone", "telephone", "mobile", "call"),
    ),
    FieldType.ADDRESS_LINE: Vocabulary(
        ("address", "addressline", "addressline1", "address1", "street", "streetaddress",
         "homeaddress", "addr"),
        ("address", "street address", "address line 1", "address line", "street", "home address"),
        ("address", "street"),
    ),
    FieldType.CITY: Vocabulary(
        ("city", "town", "locality", "addresscity"),
        ("city", "town", "city town", "locality"),
        ("city", "town"),
    ),
    FieldType.STATE: Vocabulary(
        ("state", "province", "region", "county", "addressstate"),
        ("state", "province", "region", "state province", "county"),
        ("state", "province"),
    ),
    FieldType.POSTAL_CODE: Vocabulary(
        ("zip", "zipcode", "postal", "postalcode", "postcode", "zippostal", "pincode"),
        ("zip", "zip code", "postal code", "postcode", "zip postal code", "pin code"),
        ("zip", "postal code", "postcode"),
    ),
    FieldType.COUNTRY: Vocabulary(
        ("country", "nation", "countryname"),
        ("country", "country of residence", "nation"),
        ("country",),
    ),
    FieldType.LINKEDIN_URL: Vocabulary(
        ("linkedin", "linkedinurl", "linkedinprofile"),
        ("linkedin", "linkedin url", "linkedin profile", "linked in", "linkedin profile url"),
        ("linkedin",),
    ),
    FieldType.PORTFOLIO_URL: Vocabulary(
        ("portfolio", "portfoliourl", "website", "personalwebsite", "github", "githuburl",
         "homepage", "websiteurl", "blog"),
        ("portfolio", "website", "personal website", "portfolio url", "github", "github url",
         "homepage", "personal site", "other website"),
        ("portfolio", "website", "github"),
    ),
    FieldType.COVER_LETTER: Vocabulary(
        ("coverletter", "motivationletter", "letter", "motivation", "additionalinfo",
         "whyinterested"),
        ("cover letter", "motivation letter", "letter of motivation", "why are you interested",
         "why do you want to work here", "additional information", "message to the hiring manager"),
        ("cover letter", "motivation", "interested"),
    ),
    FieldType.RESUME_TEXT: Vocabulary(
        ("resume", "cv", "resumetext", "cvtext", "curriculum", "pasteresume", "resumecontent"),
        ("resume", "cv", "resume text", "paste your resume", "paste resume", "curriculum vitae",
         "resume cv"),
        ("resume", "cv", "paste"),
    ),
})

UPLOAD_VOCABULARY = MappingProxyType({
    UploadKind.CV_RESUME: Vocabulary(
        ("resume", "cv", "curriculumvitae", "curriculum", "resumefile", "cvfile", "resumeupload",
         "cvupload"),
        ("resume", "cv", "resume cv", "cv resume", "upload resume", "upload your resume",
         "upload cv", "upload your cv", "attach resume", "attach your resume", "curriculum vitae",
         "resume file"),
        ("resume", "cv", "curriculum vitae"),
    ),
    UploadKind.COVER_LETTER: Vocabulary(
        ("coverletter", "coverletterfile", "motivationletter"),
        ("cover letter", "upload cover letter", "attach cover letter", "motivation letter"),
        ("cover letter",),
    ),
    UploadKind.PORTFOLIO: Vocabulary(
        ("portfolio", "portfoliofile", "worksamples", "samples"),
        ("portfolio", "work samples", "upload portfolio", "sample work"),
        ("portfolio", "work samples"),
    ),
    UploadKind.OTHER: Vocabulary(
        ("document", "documents", "file", "attachment", "attachments", "upload",
         "supportingdocuments", "additionaldocuments"),
        ("document", "file", "attachment", "upload", "upload file", "supporting documents",
         "additional documents", "other documents"),
        ("document", "attachment", "upload"),
    ),
})


# ---- CV vocabulary ----

SECTION_HEADERS = MappingProxyType({
    "experience": (
        "experience", "work experience", "professional experience", "employment",
        "employment history", "work history", "career history", "relevant experience",
        "professional background", "experience and employment",
    ),
    "education": (
        "education", "academic background", "educational background", "academic qualifications",
        "qualifications", "education and training", "academic history",
    ),
    "skills": (
        "skills", "technical skills", "core competencies", "competencies", "key skills",
        "expertise", "areas of expertise", "technologies", "tools and technologies",
        "skills and abilities", "core skills", "technical proficiencies",
    ),
    "summary": (
        "summary", "professional summary", "profile", "professional profile", "about me",
        "objective", "career objective", "personal statement", "overview", "about",
    ),
    "languages": ("languages", "language skills", "spoken languages"),
    "certifications": (
        "certifications", "certificates", "licenses and certifications",
        "certifications and licenses", "courses",
    ),
    "projects": ("projects", "personal projects", "key projects", "selected projects"),
    "awards": ("awards", "honors and awards", "awards and honors", "achievements"),
    "publications": ("publications",),
    "volunteer": ("volunteer experience", "volunteering", "volunteer work"),
    "interests": ("interests", "hobbies", "hobbies and interests"),
    "references": ("references",),
    "contact": ("contact", "contact information", "personal information", "personal details"),
})

JOB_TITLE_KEYWORDS: Tuple[str, ...] = (
    "engineer", "developer", "manager", "analyst", "designer", "consultant", "director",
    "intern", "specialist", "lead", "architect", "scientist", "administrator", "coordinator",
    "associate", "officer", "assistant", "technician", "programmer", "head", "vp",
    "president", "founder", "executive", "accountant", "teacher", "researcher", "writer",
    "editor", "supervisor", "representative", "advisor", "strategist", "owner", "trainee",
)

COMPANY_INDICATORS: Tuple[str, ...] = (
    "inc", "llc", "corp", "corporation", "ltd", "limited", "company", "technologies",
    "solutions", "systems", "group", "gmbh", "plc", "labs", "partners", "consulting",
    "holdings", "agency", "bank", "studios",
)

INSTITUTION_KEYWORDS: Tuple[str, ...] = (
    "university", "college", "institute", "school", "academy", "polytechnic",
    "conservatory", "universidad", "université", "universität",
)

ACHIEVEMENT_VERBS: Tuple[str, ...] = (
    "achieved", "improved", "increased", "reduced", "led", "managed", "delivered", "launched",
    "built", "designed", "developed", "implemented", "created", "drove", "grew", "saved",
    "won", "awarded", "optimized", "automated", "mentored", "spearheaded",
)

TECHNICAL_SKILLS: Tuple[str, ...] = (
    "Python", "Java", "JavaScript", "TypeScript", "C++", "C#", "C", "Go", "Rust", "Ruby",
    "PHP", "Swift", "Kotlin", "Scala", "R", "SQL", "HTML", "CSS", "Bash", "MATLAB", "Perl",
    "Dart", "React", "Angular", "Vue.js", "Node.js", "Express", "Django", "Flask", "FastAPI",
    "Spring", "Spring Boot", "Ruby on Rails", "Laravel", ".NET", "ASP.NET", "jQuery",
    "Next.js", "Svelte", "TensorFlow", "PyTorch", "Keras", "scikit-learn", "Pandas", "NumPy",
    "Spark", "Hadoop", "Git", "GitHub", "GitLab", "Docker", "Kubernetes", "Jenkins",
    "Terraform", "Ansible", "AWS", "Azure", "GCP", "Linux", "PostgreSQL", "MySQL", "MongoDB",
    "Redis", "Elasticsearch", "Kafka", "GraphQL", "REST", "Jira", "Figma", "Tableau",
    "Power BI", "Excel", "Salesforce", "CI/CD", "Machine Learning", "Deep Learning",
    "Data Analysis", "Agile", "Scrum", "Microservices", "Unit Testing",
)

SOFT_SKILLS: Tuple[str, ...] = (
    "Leadership", "Communication", "Teamwork", "Problem Solving", "Project Management",
    "Time Management", "Collaboration", "Mentoring", "Critical Thinking", "Public Speaking",
    "Negotiation", "Stakeholder Management", "Adaptability", "Creativity", "Customer Service",
)

LANGUAGE_SKILLS: Tuple[str, ...] = (
    "English", "Spanish", "French", "German", "Mandarin", "Chinese", "Japanese", "Korean",
    "Arabic", "Hindi", "Urdu", "Portuguese", "Italian", "Russian", "Dutch", "Turkish",
    "Bengali", "Punjabi", "Swedish", "Polish",
)

SKILL_ALIASES = MappingProxyType({
    "js": "JavaScript",
    "ts": "TypeScript",
    "golang": "Go",
    "node": "Node.js",
    "nodejs": "Node.js",
    "vue": "Vue.js",
    "vuejs": "Vue.js",
    "reactjs": "React",
    "react.js": "React",
    "k8s": "Kubernetes",
    "postgres": "PostgreSQL",
    "sklearn": "scikit-learn",
    "rails": "Ruby on Rails",
    "html5": "HTML",
    "css3": "CSS",
    "ml": "Machine Learning",
})

# Tokens that are ordinary words too: matched case-sensitively in free text
AMBIGUOUS_SKILLS: Tuple[str, ...] = (
    "Go", "R", "C", "Express", "Spring", "Swift", "Rust", "Dart", "Excel", "REST", "Scala",
)

SKILL_STOPWORDS: Tuple[str, ...] = (
    "and", "or", "with", "etc", "including", "other", "various", "skills", "tools",
    "languages", "frameworks", "experience", "knowledge", "proficient", "familiar",
    "technologies", "strong", "basic", "advanced", "intermediate", "the", "of", "in",
)

_SKILL_STOPWORD_SET = frozenset(SKILL_STOPWORDS)
_AMBIGUOUS_SKILL_SET = frozenset(AMBIGUOUS_SKILLS)


class PatternLibrary:
    """Read-only container of rules and vocabularies. One shared instance per process."""

    __slots__ = ("_rules", "_header_lookup", "_skill_lookup")

    def __init__(self, rules: Tuple[PatternRule, ...] = _RULES) -> None:
        grouped: dict = {}
        for rule in rules:
            grouped.setdefault(rule.category, []).append(rule)
        self._rules = MappingProxyType({k: tuple(v) for k, v in grouped.items()})

        header_lookup = {}
        for kind, phrases in SECTION_HEADERS.items():
            for phrase in phrases:
                header_lookup[phrase] = kind
        self._header_lookup = MappingProxyType(header_lookup)

        skill_lookup = {}
        for category, names in (
            (SkillCategory.LANGUAGE, LANGUAGE_SKILLS),
            (SkillCategory.SOFT, SOFT_SKILLS),
            (SkillCategory.TECHNICAL, TECHNICAL_SKILLS),
        ):
            for name in names:
                skill_lookup[name.casefold()] = (name, category)
        self._skill_lookup = MappingProxyType(skill_lookup)

    @property
    def field_vocabulary(self) -> MappingProxyType:
        return FIELD_VOCABULARY

    @property
    def upload_vocabulary(self) -> MappingProxyType:
        return UPLOAD_VOCABULARY

    @property
    def section_headers(self) -> MappingProxyType:
        return SECTION_HEADERS

    @property
    def job_title_keywords(self) -> Tuple[str, ...]:
        return JOB_TITLE_KEYWORDS

    @property
    def company_indicators(self) -> Tuple[str, ...]:
        return COMPANY_INDICATORS

    @property
    def institution_keywords(self) -> Tuple[str, ...]:
        return INSTITUTION_KEYWORDS

    @property
    def achievement_verbs(self) -> Tuple[str, ...]:
        return ACHIEVEMENT_VERBS

    @property
    def skill_stopwords(self) -> FrozenSet[str]:
        return _SKILL_STOPWORD_SET

    @property
    def ambiguous_skills(self) -> FrozenSet[str]:
        return _AMBIGUOUS_SKILL_SET

    @property
    def skill_aliases(self) -> MappingProxyType:
        return SKILL_ALIASES

    def rules(self, category: PatternCategory) -> Tuple[PatternRule, ...]:
        return self._rules.get(category, ())

    def find_all(self, category: PatternCategory, text: str) -> Iterator[PatternMatch]:
        """Yield every normalized match of a category in document order."""
        if not text:
            return
        found = []
        for rule in self.rules(category):
            for m in rule.matcher.finditer(text):
                value = rule.normalize(m)
                if value:
                    found.append(PatternMatch(category, value, rule.base_confidence, m.start(), m.end(), m.group(0)))
        found.sort(key=lambda pm: (pm.start, -pm.confidence))
        yield from found

    def best(self, category: PatternCategory, text: str) -> Optional[PatternMatch]:
        """Highest-confidence match; on exact ties the last occurrence wins."""
        winner: Optional[PatternMatch] = None
        for pm in self.find_all(category, text):
            if winner is None or pm.confidence >= winner.confidence:
                winner = pm
        return winner

    def section_kind(self, header: str) -> Optional[str]:
        """Section kind for a normalized (lower-case, letters and spaces) header line."""
        return self._header_lookup.get(header)

    def lookup_skill(self, token: str) -> Optional[Tuple[str, SkillCategory]]:
        """(canonical name, category) for a known skill or alias, else None."""
        key = normalize_whitespace(token).casefold()
        if key in self.skill_aliases:
            key = self.skill_aliases[key].casefold()
        return self._skill_lookup.get(key)

    def known_skills(self) -> Tuple[Tuple[str, SkillCategory], ...]:
        return tuple(self._skill_lookup.values())


DEFAULT_PATTERN_LIBRARY = PatternLibrary()


def get_pattern_library() -> PatternLibrary:
    return DEFAULT_PATTERN_LIBRARY
