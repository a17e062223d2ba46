#!/usr/bin/env python
# -*- coding: UTF-8 -*-

#tasmip script example

from tasmip.tasmip import calculate_spectrum
from tasmip import get_mu

#Define some parameters
kVp=100
mmAl=2.5

#Calculate a spectrum
s=calculate_spectrum(kVp,mmAl,"Al")
print("Mean energy:",s.get_mean_energy(),"keV")

#The spectrum can be cloned so the original needn't be recalculated
s2=s.clone()
s2.attenuate(0.02,get_mu("Cu")) #0.2 mm of Cu
print("Transmitted photons:",s2.get_norm())
print("Mean energy with 0.2 mm Cu:",s2.get_mean_energy(),"keV")

#Export the spectrum
s.export_csv(str(kVp)+"kVp.csv")
s.export_xlsx(str(kVp)+"kVp.xlsx")
