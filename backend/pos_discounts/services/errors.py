from typing import List


class ConfigurationError(Exception):
    """Кампания содержит некорректные правила, оценка невозможна"""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


# Коды нефатальных предупреждений в результате
RESOLUTION_AMBIGUITY = "resolution_ambiguity"
CAMPAIGN_NOT_ACTIVE = "campaign_not_active"
NO_CAMPAIGN = "no_campaign"
