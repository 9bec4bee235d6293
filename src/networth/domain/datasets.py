"""Document keys of the logical datasets kept in the document store."""

SOURCE_ACCOUNTS_KEY = "liquid_assets_accounts"
TARGET_ACCOUNTS_KEY = "account_data"
GROUPS_KEY = "account_groups"
SNAPSHOTS_KEY = "liquid_assets_records"
AGGREGATES_KEY = "annual_data"
SETTINGS_KEY = "sync_settings"
NAME_MAPPING_KEY = "name_mapping"

ALL_KEYS = (
    SOURCE_ACCOUNTS_KEY,
    TARGET_ACCOUNTS_KEY,
    GROUPS_KEY,
    SNAPSHOTS_KEY,
    AGGREGATES_KEY,
    SETTINGS_KEY,
    NAME_MAPPING_KEY,
)
