class ProviderError(Exception):
    """An external map provider could not produce a usable answer."""


class DirectionsError(ProviderError):
    pass


class PlacesError(ProviderError):
    pass
