from .sysfs import TokenEnum, ScalingGovernor, EnergyPerformancePreference


class PowerProfile(TokenEnum):
    POWER_SAVER = "power-saver"
    BALANCED = "balanced"
    PERFORMANCE = "performance"


PROFILE_ALIASES = {
    "powersave":    "power-saver",
    "power-saver":  "power-saver",
    "balanced":     "balanced",
    "performance":  "performance",
}

# Not configurable at runtime.
DESIRED_POLICY = {
    PowerProfile.POWER_SAVER: (ScalingGovernor.POWERSAVE, EnergyPerformancePreference.POWER),
    PowerProfile.BALANCED:    (ScalingGovernor.POWERSAVE,
                               EnergyPerformancePreference.BALANCE_PERFORMANCE),
    PowerProfile.PERFORMANCE: (ScalingGovernor.PERFORMANCE,
                               EnergyPerformancePreference.PERFORMANCE),
}

def normalize_profile(profile):
    return PROFILE_ALIASES.get(profile, profile)

def parse_profile(token):
    """Turn a raw profile token from the bus into a PowerProfile, raising ParseError if unknown."""
    return PowerProfile.from_token(normalize_profile(str(token).strip()))

def desired_policy(profile):
    """Return the (governor, EPP) pair a power profile maps to."""
    return DESIRED_POLICY[profile]
