"""Configuration module for examguard.

Available Configurations:
- SessionPolicyConfig: Duration, escalation threshold, cooldown and grace periods
"""

from examguard.config.session_policy_config import (
    DEFAULT_SESSION_POLICY,
    INTERVIEW_SESSION_POLICY,
    TEST_SESSION_POLICY,
    SessionPolicyConfig,
)

__all__ = [
    "SessionPolicyConfig",
    "DEFAULT_SESSION_POLICY",
    "TEST_SESSION_POLICY",
    "INTERVIEW_SESSION_POLICY",
]
