"""Process variable names exposed by the game's webserver."""

TIME_STAMP = "TIME_STAMP"

CORE_TEMP = "CORE_TEMP"
CORE_REACTIVITY = "CORE_STATE_CRITICALITY"
CORE_XENON_CUMULATIVE = "CORE_XENON_CUMULATIVE"
CORE_XENON_GENERATION = "CORE_XENON_GENERATION"
CORE_IODINE_CUMULATIVE = "CORE_IODINE_CUMULATIVE"
CORE_IODINE_GENERATION = "CORE_IODINE_GENERATION"
CORE_OPERATION_MODE = "CORE_OPERATION_MODE"

CONDENSER_TEMP = "CONDENSER_TEMPERATURE"
CONDENSER_PUMP_SPEED = "CONDENSER_CIRCULATION_PUMP_ORDERED_SPEED"

BORON_PPM = "CHEM_BORON_PPM"
BORON_DOSAGE = "CHEM_BORON_DOSAGE_ORDERED_RATE"
BORON_FILTER = "CHEM_BORON_FILTER_ORDERED_SPEED"

RODS_QUANTITY = "RODS_QUANTITY"
RODS_POS_ACTUAL = "RODS_POS_ACTUAL"
RODS_ALL_ORDERED = "RODS_ALL_POS_ORDERED"


def rod_bank_actual(i: int) -> str:
    return f"ROD_BANK_POS_{i}_ACTUAL"


def rod_bank_ordered(i: int) -> str:
    return f"ROD_BANK_POS_{i}_ORDERED"
