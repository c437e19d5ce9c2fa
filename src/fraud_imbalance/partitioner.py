import pandas as pd
from sklearn.model_selection import train_test_split

from .exceptions import DegenerateSplitError
from .utils.logger import get_logger


class Partitioner:
    """Single stratified train/evaluation split that keeps the original index."""

    def __init__(self, train_fraction: float = 0.8, random_state: int = 42):
        if not 0.0 < train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
        self.train_fraction = train_fraction
        self.random_state = random_state
        self.logger = get_logger(self.__class__.__name__)

    def split(self, df: pd.DataFrame, target_col: str) -> tuple[pd.DataFrame, pd.DataFrame]:
        labels = df[target_col]
        if labels.nunique() < 2:
            raise DegenerateSplitError("Cannot stratify: dataset contains a single class")

        try:
            train_df, eval_df = train_test_split(
                df,
                train_size=self.train_fraction,
                stratify=labels,
                shuffle=True,
                random_state=self.random_state,
            )
        except ValueError as exc:
            raise DegenerateSplitError(f"Stratified split failed: {exc}") from exc

        self.logger.info(
            f"Split {len(df):,} rows into train={len(train_df):,} / eval={len(eval_df):,} "
            f"(seed={self.random_state})"
        )
        return train_df, eval_df
