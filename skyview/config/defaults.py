"""Default provider endpoints and the fixed display location."""

OWM_BASE_URL = "https://api.openweathermap.org/data/2.5"
OWM_GEO_URL = "https://api.openweathermap.org/geo/1.0"
OWM_ICON_URL = "https://openweathermap.org/img/wn"

DEFAULT_API_KEY_ENV = "OPENWEATHERMAP_API_KEY"

# Jianye District, Nanjing
DEFAULT_LOCATION_QUERY = "Jianye,Nanjing,CN"
