# constants.py
BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series/"
)
US_CASES_URL = BASE_URL + "time_series_covid19_confirmed_US.csv"
US_DEATHS_URL = BASE_URL + "time_series_covid19_deaths_US.csv"
GLOBAL_CASES_URL = BASE_URL + "time_series_covid19_confirmed_global.csv"
GLOBAL_DEATHS_URL = BASE_URL + "time_series_covid19_deaths_global.csv"
LOOKUP_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/UID_ISO_FIPS_LookUp_Table.csv"
)

# Segundos antes de abandonar una descarga (la corrida falla).
REQUEST_TIMEOUT = 120

# Las cabeceras de fecha tienen la forma "1/22/20".
DATE_FORMAT = "%m/%d/%y"

# Columnas que preceden a las fechas en las tablas crudas de CSSE.
US_ID_COLUMNS = [
    "UID", "iso2", "iso3", "code3", "FIPS", "Admin2",
    "Province_State", "Country_Region", "Lat", "Long_", "Combined_Key",
]
US_DEATHS_ID_COLUMNS = US_ID_COLUMNS + ["Population"]
GLOBAL_ID_COLUMNS = ["Province/State", "Country/Region", "Lat", "Long"]
LOOKUP_COLUMNS = ["Combined_Key", "Population"]
SERIES_METADATA_COLUMNS = frozenset(US_DEATHS_ID_COLUMNS + GLOBAL_ID_COLUMNS)

# cabecera cruda -> nombre limpio
TIDY_NAMES = {
    "Country_Region": "country",
    "Country/Region": "country",
    "Province_State": "province",
    "Province/State": "province",
    "Population": "population",
    "Combined_Key": "combined_key",
}

# Corea del Norte reporta cifras de casos inverosímiles (un puñado en total);
# su serie de casos se elimina antes de sumar por país.
EXCLUDED_CASE_COUNTRIES = frozenset({"Korea, North"})

# Tasas por mil iguales o menores a este valor se consideran no reportadas
# al elegir los países con menor tasa.
NOISE_FLOOR = 0.01
RANK_SIZE = 5
PER_THOUSAND = 1000
