from typing import Optional

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype

from .exceptions import SchemaError
from .utils.logger import get_logger

NEGATIVE_LABEL = "non-fraudulent"
POSITIVE_LABEL = "fraudulent"
LABELS = [NEGATIVE_LABEL, POSITIVE_LABEL]


class DataLoader:
    """Loads the transaction CSV, drops the time column and labels the target."""

    def __init__(
        self,
        path: str,
        time_col: str = "Time",
        target_col: str = "Class",
        negative_value=0,
        positive_value=1,
        sample_size: Optional[int] = None,
        sample_seed: int = 42,
    ):
        self.path = path
        self.time_col = time_col
        self.target_col = target_col
        self.negative_value = negative_value
        self.positive_value = positive_value
        self.sample_size = sample_size
        self.sample_seed = sample_seed
        self.logger = get_logger(self.__class__.__name__)

    def load(self) -> pd.DataFrame:
        df = pd.read_csv(self.path)
        df = self.prepare(df)
        if self.sample_size:
            df = df.sample(self.sample_size, random_state=self.sample_seed)
        self.logger.info(f"Loaded dataset: {df.shape[0]:,} rows x {df.shape[1]} cols")
        return df

    def prepare(self, df: pd.DataFrame) -> pd.DataFrame:
        """Validate the raw table, drop the time column and coerce the target."""
        missing = [c for c in (self.time_col, self.target_col) if c not in df.columns]
        if missing:
            raise SchemaError(f"Missing required columns: {missing}")

        target = df[self.target_col]
        if target.isna().any():
            raise SchemaError(f"Target column '{self.target_col}' has missing values")

        allowed = [self.negative_value, self.positive_value]
        unexpected = sorted(set(target[~target.isin(allowed)].unique().tolist()), key=str)
        if unexpected:
            raise SchemaError(
                f"Target column '{self.target_col}' has values outside {allowed}: {unexpected}"
            )

        out = df.drop(columns=[self.time_col])

        non_numeric = [
            c for c in out.columns
            if c != self.target_col and not is_numeric_dtype(out[c])
        ]
        if non_numeric:
            raise SchemaError(f"Non-numeric feature columns: {non_numeric}")

        features = out.drop(columns=[self.target_col])
        with_nan = features.columns[features.isna().any()].tolist()
        if with_nan:
            raise SchemaError(f"Feature columns with missing values: {with_nan}")

        mapping = {self.negative_value: NEGATIVE_LABEL, self.positive_value: POSITIVE_LABEL}
        out[self.target_col] = pd.Categorical(target.map(mapping), categories=LABELS)
        return out


def encode_target(labels: pd.Series) -> np.ndarray:
    """Map the categorical label back to 0/1 ints (1 = fraudulent)."""
    return (np.asarray(labels) == POSITIVE_LABEL).astype(int)


def split_features(df: pd.DataFrame, target_col: str) -> tuple[pd.DataFrame, np.ndarray]:
    return df.drop(columns=[target_col]), encode_target(df[target_col])
