"""Trade Prices – core infrastructure (configuration, logging, time, types)."""
