"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod


class IRosterRepository(ABC):
    @abstractmethod
    def add_season(
        self,
        name: str,
        year: int | None = None,
        tryout2_date: str | None = None,
        is_current: bool = False,
    ) -> int: ...

    @abstractmethod
    def add_division(
        self, name: str, level: int, active: bool = True, team_count: int | None = None
    ) -> int: ...

    @abstractmethod
    def add_player(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        preferred_name: str | None = None,
        male: bool | None = None,
    ) -> None: ...

    @abstractmethod
    def add_signup(
        self,
        season_id: int,
        user_id: str,
        pair_pick: str | None = None,
        dates_missing: str | None = None,
    ) -> None: ...

    @abstractmethod
    def add_captain(self, season_id: int, user_id: str, division_id: int) -> None: ...

    @abstractmethod
    def add_draft_pick(self, user_id: str, season_id: int, overall: int) -> None: ...

    @abstractmethod
    def add_evaluation(self, season_id: int, player_id: str, division_id: int) -> None: ...

    @abstractmethod
    def get_season(self, season_id: int): ...

    @abstractmethod
    def get_current_season(self): ...

    @abstractmethod
    def get_active_divisions(self): ...

    @abstractmethod
    def get_signups(self, season_id: int): ...

    @abstractmethod
    def get_captains(self, season_id: int) -> dict[str, int]: ...

    @abstractmethod
    def get_draft_history(self, user_ids: list[str]): ...

    @abstractmethod
    def get_evaluation_levels(self, season_id: int, user_ids: list[str]) -> dict[str, list[int]]: ...

    @abstractmethod
    def save_assignments(self, season_id: int, assignments) -> int: ...

    @abstractmethod
    def get_assignments(self, season_id: int): ...
