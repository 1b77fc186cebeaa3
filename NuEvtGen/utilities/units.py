"""
standard system of units
===================================

Use the units defined in this file whenever you have a dimensional
quantity in your code.  For example, write:

    ``E = 1.5 * units.GeV``

instead of:

    ``E = 1.5   # don't forget this is in GeV!``

All dimensional quantities are converted into the internal base units,
so that splines, path lengths and cross sections always live in one
system of units. To display a value in the unit of your choice divide by
that unit, e.g. ``xsec / units.cm2``.

The base units are:
-------------------
   * meter                   (meter)
   * nanosecond              (nanosecond)
   * electron Volt           (eV)
   * positron charge         (eplus)

"""

# Prefixes
femto = 1e-15
pico = 1e-12
nano = 1e-9
micro = 1e-6
milli = 1e-3
centi = 1e-2
deci = 1e-1
kilo = 1e+3
mega = 1e+6
giga = 1e+9
tera = 1e+12
peta = 1e+15
exa = 1e+18

# Length [L]
meter = 1
meter2 = meter * meter
meter3 = meter * meter * meter

millimeter = milli * meter
millimeter2 = millimeter * millimeter

centimeter = centi * meter
centimeter2 = centimeter * centimeter
centimeter3 = centimeter * centimeter * centimeter

kilometer = kilo * meter

fermi = femto * meter

barn = 1e-28 * meter2
millibarn = milli * barn
microbarn = micro * barn
nanobarn = nano * barn
picobarn = pico * barn
femtobarn = femto * barn

# symbols
mm = millimeter
mm2 = millimeter2

cm = centimeter
cm2 = centimeter2
cm3 = centimeter3

m = meter
m2 = meter2
m3 = meter3

km = kilometer

mb = millibarn
pb = picobarn
fb = femtobarn

# Time [T]
nanosecond = 1
second = giga * nanosecond
ns = nanosecond
s = second

# Electric charge [Q]
eplus = 1  # positron charge
eSI = 1.602176462e-19  # positron charge in coulomb

# Energy [E]
electronvolt = 1
kiloelectronvolt = kilo * electronvolt
megaelectronvolt = mega * electronvolt
gigaelectronvolt = giga * electronvolt
teraelectronvolt = tera * electronvolt
petaelectronvolt = peta * electronvolt
exaelectronvolt = exa * electronvolt
joule = electronvolt / eSI

# symbols
eV = electronvolt
keV = kiloelectronvolt
MeV = megaelectronvolt
GeV = gigaelectronvolt
TeV = teraelectronvolt
PeV = petaelectronvolt
EeV = exaelectronvolt

# Mass [E][T^2][L^-2]
kilogram = joule * second * second / (meter * meter)
gram = milli * kilogram

# symbols
kg = kilogram
g = gram

# Miscellaneous
fraction = 1
percent = 0.01
