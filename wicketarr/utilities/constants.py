"""Classification constants for cricket match categorization.

Reference lists used by the classifier. These are data, not logic: extend
them here rather than adding special cases in the classifier. Matching is a
case-insensitive substring test against whitespace-normalized text, so
every entry must be lowercase.

Precedence between these tables is decided in
wicketarr.consumers.classifier.classify_category and must not be reordered.
"""

# =============================================================================
# CATEGORY / GENDER VALUES
# =============================================================================

CATEGORY_INTERNATIONAL = "international"
CATEGORY_DOMESTIC = "domestic"
CATEGORY_FIRST_CLASS = "first-class"
CATEGORY_FRANCHISE = "franchise"

ALL_CATEGORIES: tuple[str, ...] = (
    CATEGORY_INTERNATIONAL,
    CATEGORY_FIRST_CLASS,
    CATEGORY_DOMESTIC,
    CATEGORY_FRANCHISE,
)

GENDER_MEN = "men"
GENDER_WOMEN = "women"

ALL_GENDERS: tuple[str, ...] = (GENDER_MEN, GENDER_WOMEN)

DEFAULT_CATEGORY_FILTERS: tuple[str, ...] = (CATEGORY_INTERNATIONAL, CATEGORY_DOMESTIC)
DEFAULT_GENDER_FILTERS: tuple[str, ...] = ALL_GENDERS


# =============================================================================
# FRANCHISE LEAGUES
# Private T20/T10 leagues. Checked after regional-domestic detection so an
# Indian state side in a state T20 league is never labelled franchise.
# =============================================================================

FRANCHISE_SERIES: tuple[str, ...] = (
    "indian premier league",
    "ipl",
    "big bash",
    "bbl",
    "pakistan super league",
    "psl",
    "caribbean premier league",
    "cpl",
    "the hundred",
    "bangladesh premier league",
    "bpl",
    "lanka premier league",
    "lpl",
    "sa20",
    "major league cricket",
    "mlc",
    "global t20",
    "gt20",
    "super smash",
    "t10 league",
    "abu dhabi t10",
)


# =============================================================================
# FIRST-CLASS COMPETITIONS
# =============================================================================

FIRST_CLASS_SERIES: tuple[str, ...] = (
    "first class",
    "ranji trophy",
    "sheffield shield",
    "county championship",
    "plunket shield",
    "logan cup",
    "quaid-e-azam trophy",
    "four-day",
    "4-day",
)

# Match-type text that marks a multi-day/first-class fixture
FIRST_CLASS_MATCH_TYPES: tuple[str, ...] = (
    "first class",
    "four-day",
    "4-day",
)

# Series fragments that mark the first-class tier of Indian domestic cricket
REGIONAL_FIRST_CLASS_SERIES: tuple[str, ...] = (
    "ranji",
    "elite group",
    "plate",
)


# =============================================================================
# DOMESTIC LIMITED-OVERS (List A / T20) COMPETITIONS
# =============================================================================

DOMESTIC_LIMITED_OVERS_SERIES: tuple[str, ...] = (
    "list a",
    "vijay hazare trophy",
    "syed mushtaq ali",
    "smat",
    "royal london one-day",
    "deodhar trophy",
    "duleep trophy",
    "momentum one day cup",
    "marsh one-day cup",
    "national t20 cup",
    "super50",
    "one-day cup",
)

DOMESTIC_LIMITED_OVERS_MATCH_TYPES: tuple[str, ...] = ("list a",)

# Domestic T20 is "t20" in the match type but never the international "t20i"
DOMESTIC_T20_MATCH_TYPE = "t20"
INTERNATIONAL_T20_MATCH_TYPE = "t20i"


# =============================================================================
# REGIONAL DOMESTIC (INDIA)
# Series fragments and state/region team names that flag a match as part of
# the Indian domestic structure.
# =============================================================================

REGIONAL_DOMESTIC_SERIES: tuple[str, ...] = (
    "ranji trophy",
    "vijay hazare",
    "syed mushtaq ali",
    "smat",
    "duleep trophy",
    "deodhar trophy",
    "irani cup",
    "elite group",
    "plate",
)

REGIONAL_DOMESTIC_TEAMS: tuple[str, ...] = (
    "mumbai",
    "delhi",
    "karnataka",
    "tamil nadu",
    "bengal",
    "saurashtra",
    "vidarbha",
    "baroda",
    "gujarat",
    "maharashtra",
    "punjab",
    "services",
    "railways",
    "uttarakhand",
    "hyderabad",
    "andhra",
    "kerala",
    "jharkhand",
    "jammu",
    "kashmir",
    "haryana",
    "uttar pradesh",
    "madhya pradesh",
    "assam",
    "goa",
    "tripura",
    "manipur",
    "meghalaya",
    "mizoram",
    "nagaland",
    "sikkim",
    "chhattisgarh",
    "himachal",
    "rajasthan",
    "pondicherry",
    "chandigarh",
    "odisha",
    "orissa",
)


# =============================================================================
# INTERNATIONAL MARKERS
# =============================================================================

INTERNATIONAL_SERIES: tuple[str, ...] = (
    "t20i",
    "odi",
    "test",
    "icc",
    "world cup",
    "asia cup",
    "champions trophy",
    "tri-series",
    "tour of",
    "international",
)

# Whole-token formats in match-type text
INTERNATIONAL_MATCH_TYPE_PATTERN = r"(t20i|odi|test)"


# =============================================================================
# GENDER MARKERS
# =============================================================================

WOMEN_SERIES_MARKERS: tuple[str, ...] = ("women", "womens")

# Team name containing " women" (e.g. "india women")
WOMEN_TEAM_MARKER = " women"

# Short names like "ind-w" or "aus women"
WOMEN_SHORT_NAME_PATTERN = r"-w\b| women\b"


# =============================================================================
# LIVENESS VOCABULARY
# =============================================================================

# Status text that means play is in progress or about to resume
LIVE_STATUS_PATTERN = (
    r"(live|day|inning|session|break|opt to bat|opt to bowl|opted to bat|opted to bowl)"
)

# Status text that means the match (or the day's play) is over
FINISHED_STATUS_PATTERN = r"(stump|stumps|abandon|no result|completed|won by|finished|match tied)"
