from thanos_finance.core.models import Progress
from thanos_finance.core.progress import grant_experience, rank_for_level


class TestGrantExperience:
    def test_below_threshold_keeps_level(self):
        progress, leveled_up = grant_experience(Progress(), 999)
        assert progress.experience == 999
        assert progress.level == 1
        assert not leveled_up

    def test_exact_threshold_levels_up(self):
        progress, leveled_up = grant_experience(Progress(), 1000)
        assert progress.level == 2
        assert leveled_up

    def test_large_grant_advances_one_level_only(self):
        progress, leveled_up = grant_experience(Progress(), 5000)
        assert progress.experience == 5000
        assert progress.level == 2
        assert leveled_up

    def test_next_grant_catches_up_one_more_level(self):
        progress, _ = grant_experience(Progress(), 5000)
        progress, leveled_up = grant_experience(progress, 10)
        assert progress.level == 3
        assert leveled_up

    def test_non_positive_grant_is_ignored(self):
        start = Progress(experience=300, level=1)
        assert grant_experience(start, 0) == (start, False)
        assert grant_experience(start, -50) == (start, False)

    def test_input_progress_is_not_mutated(self):
        start = Progress()
        grant_experience(start, 1200)
        assert start.experience == 0
        assert start.level == 1

    def test_rank_follows_level(self):
        progress, _ = grant_experience(Progress(experience=4500, level=4), 600)
        assert progress.level == 5
        assert progress.rank_title == "Conquistador"


class TestRankForLevel:
    def test_thresholds(self):
        assert rank_for_level(1) == "Iniciado"
        assert rank_for_level(4) == "Iniciado"
        assert rank_for_level(5) == "Conquistador"
        assert rank_for_level(10) == "General da Ordem"
        assert rank_for_level(19) == "General da Ordem"
        assert rank_for_level(20) == "Titã Louco"


def test_level_progress_is_capped():
    assert Progress(experience=500, level=1).level_progress == 50.0
    assert Progress(experience=5000, level=2).level_progress == 100.0


def test_stored_rank_is_rederived_from_level():
    progress = Progress.from_dict({'xp': 12000, 'level': 12, 'rankTitle': "Iniciado"})
    assert progress.rank_title == "General da Ordem"
    assert progress.to_dict()['rankTitle'] == "General da Ordem"
