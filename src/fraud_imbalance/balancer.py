from typing import Any, Literal, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from imblearn.over_sampling import SMOTE
from sklearn.utils import resample

from .data_loader import LABELS, POSITIVE_LABEL, encode_target
from .exceptions import DegenerateResampleError
from .utils.logger import get_logger

STRATEGIES = ("identity", "upsample", "downsample", "smote")

Strategy = Literal["identity", "upsample", "downsample", "smote"]


class Balancer:
    """
    Derives a training set with a different class mix: identity, random
    up-sampling of positives, random down-sampling of negatives, or SMOTE
    combined with random down-sampling of negatives.

    Example:
        balancer = Balancer(strategy="smote", random_state=7)
        train_b = balancer.balance(train_df, target_col="Class")
    """

    def __init__(
        self,
        strategy: Strategy = "identity",
        random_state: int = 42,
        k_neighbors: int = 5,
        multiplier: float = 2.0,
        majority_ratio: float = 2.0,
    ):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown balancing strategy: {strategy}")
        if k_neighbors < 1:
            raise ValueError("k_neighbors must be >= 1")
        if multiplier <= 0 or majority_ratio <= 0:
            raise ValueError("multiplier and majority_ratio must be positive")

        self.strategy = strategy
        self.random_state = random_state
        self.k_neighbors = k_neighbors
        self.multiplier = multiplier
        self.majority_ratio = majority_ratio
        self.logger = get_logger(self.__class__.__name__)

    def balance(self, df: pd.DataFrame, target_col: str) -> pd.DataFrame:
        if self.strategy == "identity":
            return df

        y = encode_target(df[target_col])
        n_pos = int(np.sum(y == 1))
        n_neg = int(np.sum(y == 0))

        if n_pos == 0 or n_neg == 0:
            raise DegenerateResampleError(
                f"{self.strategy}: training set has an empty class "
                f"(positive={n_pos}, negative={n_neg})"
            )

        if self.strategy == "upsample":
            out = self._upsample(df, y, n_pos, n_neg)
        elif self.strategy == "downsample":
            out = self._downsample(df, y, n_pos, n_neg)
        else:
            out = self._smote(df, y, target_col, n_pos, n_neg)

        y_out = encode_target(out[target_col])
        self.logger.info(
            f"{self.strategy}: {len(df):,} -> {len(out):,} rows "
            f"(positive={int(y_out.sum()):,}, negative={int((y_out == 0).sum()):,})"
        )
        return out

    def _upsample(self, df: pd.DataFrame, y: np.ndarray, n_pos: int, n_neg: int) -> pd.DataFrame:
        n_to_add = n_neg - n_pos
        if n_to_add < 0:
            raise DegenerateResampleError("upsample: positive class is not the minority")
        if n_to_add == 0:
            return df.copy()

        pos_up = resample(
            df[y == 1],
            replace=True,
            n_samples=n_to_add,
            random_state=self.random_state,
        )
        return pd.concat([df, pos_up])

    def _downsample(self, df: pd.DataFrame, y: np.ndarray, n_pos: int, n_neg: int) -> pd.DataFrame:
        if n_pos > n_neg:
            raise DegenerateResampleError("downsample: positive class is not the minority")

        neg_down = resample(
            df[y == 0],
            replace=False,
            n_samples=n_pos,
            random_state=self.random_state,
        )
        return pd.concat([df[y == 1], neg_down])

    def _smote(
        self,
        df: pd.DataFrame,
        y: np.ndarray,
        target_col: str,
        n_pos: int,
        n_neg: int,
    ) -> pd.DataFrame:
        if n_pos < self.k_neighbors + 1:
            raise DegenerateResampleError(
                f"smote: {n_pos} positive records, need at least k+1={self.k_neighbors + 1}"
            )

        n_new = max(1, int(round(n_pos * self.multiplier)))
        # interpolated rows must not be truncated to integer columns
        X = df.drop(columns=[target_col]).astype(float)

        sm = SMOTE(
            sampling_strategy={1: n_pos + n_new},
            k_neighbors=self.k_neighbors,
            random_state=self.random_state,
        )
        try:
            X_res, _ = sm.fit_resample(X, y)
        except ValueError as exc:
            raise DegenerateResampleError(f"smote: {exc}") from exc

        # SMOTE appends the generated rows after the original ones
        synthetic = pd.DataFrame(np.asarray(X_res)[len(X):], columns=X.columns)
        synthetic[target_col] = POSITIVE_LABEL

        n_keep = min(n_neg, int(round(self.majority_ratio * n_new)))
        rng = np.random.RandomState(self.random_state)
        keep_neg = rng.choice(np.where(y == 0)[0], size=n_keep, replace=False)

        out = pd.concat(
            [df[y == 1], synthetic[df.columns], df.iloc[np.sort(keep_neg)]],
            ignore_index=True,
        )
        out[target_col] = pd.Categorical(out[target_col], categories=LABELS)
        return out


class ResamplerBank:
    """Named, independently seeded resampling strategies over one training set."""

    def __init__(
        self,
        strategies: Optional[Sequence[str]] = None,
        seeds: Optional[Mapping[str, int]] = None,
        smote_params: Optional[Mapping[str, Any]] = None,
        random_state: int = 42,
    ):
        self.strategies = list(STRATEGIES if strategies is None else strategies)
        if not self.strategies:
            raise ValueError("At least one balancing strategy is required")
        unknown = [s for s in self.strategies if s not in STRATEGIES]
        if unknown:
            raise ValueError(f"Unknown balancing strategies: {unknown}")
        self.seeds = dict(seeds or {})
        self.smote_params = dict(smote_params or {})
        self.random_state = random_state

    @property
    def names(self) -> list[str]:
        return list(self.strategies)

    def balancer(self, name: str) -> Balancer:
        params = self.smote_params if name == "smote" else {}
        return Balancer(
            strategy=name,
            random_state=self.seeds.get(name, self.random_state),
            **params,
        )

    def resample(self, name: str, train_df: pd.DataFrame, target_col: str) -> pd.DataFrame:
        return self.balancer(name).balance(train_df, target_col)
