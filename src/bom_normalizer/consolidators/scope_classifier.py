"""
Usage scope classification for a single artifact occurrence.
"""

from typing import Optional

from ..models import Artifact, UsageReport, UsageScope


class ScopeClassifier:
    """
    Infers the usage scope of an artifact from a usage analysis report.

    REQUIRED when the analysis saw the artifact used (declared or not),
    OPTIONAL when it was declared but unused or declared outside the test
    scope while only tests use it, UNKNOWN otherwise or when no analysis ran.
    """

    def classify(self, artifact: Artifact, usage_report: Optional[UsageReport]) -> UsageScope:
        """
        Classify one occurrence of an artifact.

        Args:
            artifact: Artifact from the module's resolved dependencies
            usage_report: Usage analysis for the module, or None

        Returns:
            Usage scope for this occurrence
        """
        if usage_report is None:
            return UsageScope.UNKNOWN

        if artifact in usage_report.used_declared or artifact in usage_report.used_undeclared:
            return UsageScope.REQUIRED

        if (artifact in usage_report.unused_declared
                or artifact in usage_report.test_artifacts_with_non_test_scope):
            return UsageScope.OPTIONAL

        return UsageScope.UNKNOWN

