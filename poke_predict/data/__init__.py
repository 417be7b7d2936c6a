"""Static game data: name normalisation and the type chart."""
