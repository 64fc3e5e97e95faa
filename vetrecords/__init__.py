"""vetrecords - clinical medical-record core of a veterinary clinic backend."""

__version__ = "1.0.0"
