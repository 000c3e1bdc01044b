"""Shared analytics constants.

Centralizes the thresholds and physical constants used by the pipeline so
they can be documented and adjusted in one place.
"""

# Mean Earth radius in meters (haversine)
EARTH_RADIUS_M = 6371000.0

# Heart rate zone bounds as fractions of HR max.
# Z1: [0.50, 0.60), Z2: [0.60, 0.70), ..., Z5: [0.90, 1.01)
HR_ZONE_BOUNDS = [0.5, 0.6, 0.7, 0.8, 0.9, 1.01]

# Pace samples at or above this (min/km) are outliers for classification
PACE_OUTLIER_MIN_KM = 20.0

# Supported upstream providers
ACTIVITY_SOURCES = ("garmin", "strava", "polar", "strava_gpx", "zepp_gpx", "manual")

# Overtraining factor weights
TRAINING_LOAD_WEIGHT = 0.35
FREQUENCY_WEIGHT = 0.25
INTENSITY_WEIGHT = 0.20
VOLUME_TREND_WEIGHT = 0.20

# An activity is "high intensity" above either of these
HIGH_INTENSITY_MAX_HR = 170
HIGH_INTENSITY_AVG_HR = 150

# Variation analysis needs at least this many heart-rate samples
VARIATION_MIN_HR_SAMPLES = 5
