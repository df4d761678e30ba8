"""Application constants."""

USER_AGENT = "catalog-ingest/0.3 (+open-data ingestion)"
DEFAULT_COUNTRY = "Slovenská republika"
AFFIRMATIVE_TOKEN = "áno"
WGS84_EPSG = 4326
DEFAULT_TIMEOUT_SECONDS = 30.0
TRANSPORTS = ("verified", "insecure")

# Role annotations appended to each name in the staff roster field.
STAFF_ROLE_SUFFIXES = (
    " ako lekár",
    " ako sestra",
    " ako iný zdravotnícky pracovník - psychológ",
    " ako zubný lekár",
    " ako iný zdravotnícky pracovník - logopéd",
    " ako iný zdravotnícky pracovník - liečebný pedagóg",
    " ako dentálna hygienička",
    " ako zdravotnícky laborant",
    " ako pôrodná asistentka",
    " ako rádiologický technik",
)

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

COMMANDS = ("ingest", "specialties", "specialists", "decode-wkt")
EXIT_SUCCESS = 0
EXIT_PIPELINE_FAIL = 20
EXIT_CONFIG_FAIL = 30
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "entity",
    "entity_name",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
