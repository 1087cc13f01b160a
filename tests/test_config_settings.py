from config.settings import MICRODATA_REQUIRED_COLUMNS, Settings


def test_settings_fields_are_all_used_knobs():
    fields = set(Settings.model_fields)

    assert "DEBUG" not in fields
    assert {"LOG_LEVEL", "LOG_DIR", "WEIGHT_COLUMN", "MIN_ADULT_YEAR"} <= fields


def test_settings_defaults():
    defaults = {name: field.default for name, field in Settings.model_fields.items()}

    assert defaults["WEIGHT_COLUMN"] == "ASECWTH"
    assert defaults["MIN_ADULT_YEAR"] == 18
    assert defaults["CPI_ANNUAL_PERIOD"] == "M13"
    assert "ASECWTH" in MICRODATA_REQUIRED_COLUMNS
