__version__ = "0.1.0"

from tasmip.attenuation import NistAttenuation, data_path, get_mu, log_interp_1d
from tasmip.coefficients import ENERGIES, NUM_POLYNOMIAL_TERMS, POLYNOMIAL_COEFFICIENTS
from tasmip.spectrum import Spectrum
from tasmip.tasmip import (
    DegenerateSpectrumError,
    OutOfRangeError,
    SpectrumGenerator,
    TasmipError,
    calculate_spectrum,
)
