# errors.py


class CovidRatesError(Exception):
    """Clase base de todos los errores del pipeline."""


class FetchError(CovidRatesError):
    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"No se pudo descargar {url}: {reason}")


class SchemaError(FetchError):
    def __init__(self, url, missing):
        self.missing = list(missing)
        super().__init__(url, f"faltan columnas {self.missing}")


class MalformedDateError(CovidRatesError):
    """Una cabecera de fecha no sigue el formato M/D/YY."""

    def __init__(self, values):
        self.values = list(values)
        super().__init__(f"Fechas no parseables: {self.values}")


class InsufficientDataError(CovidRatesError):
    pass
