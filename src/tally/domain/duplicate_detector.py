"""Duplicate detection between imported rows and stored transactions."""

from typing import Iterable, Optional

from tally.domain.csv_models import DuplicateCheckResult, ParsedTransaction
from tally.domain.entities import Transaction


def levenshtein_distance(s1: str, s2: str) -> int:
    """Edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            if c1 == c2:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]


def string_similarity(s1: str, s2: str) -> float:
    """Similarity between 0.0 and 1.0 based on edit distance."""
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    return 1.0 - levenshtein_distance(s1, s2) / max(len(s1), len(s2))


class DuplicateDetector:
    """Classifies parsed rows as new or as duplicates of stored transactions.

    An exact match (same date, same amount, same merchant ignoring case)
    scores 1.0. Otherwise a score is added up from three signals:

    - date: up to ``date_weight``, decaying linearly by ``1 / (tolerance + 1)``
      per day apart and zero beyond ``date_tolerance_days``
    - amount: ``amount_weight`` when the amounts are identical
    - merchant: ``merchant_weight`` times the edit-distance similarity

    A row is a duplicate when its best score exceeds ``threshold``.
    """

    DUPLICATE_THRESHOLD = 0.75
    DATE_TOLERANCE_DAYS = 3
    DATE_WEIGHT = 0.4
    AMOUNT_WEIGHT = 0.4
    MERCHANT_WEIGHT = 0.2

    def __init__(
        self,
        threshold: Optional[float] = None,
        date_tolerance_days: Optional[int] = None,
        date_weight: Optional[float] = None,
        amount_weight: Optional[float] = None,
        merchant_weight: Optional[float] = None,
    ):
        self.threshold = self.DUPLICATE_THRESHOLD if threshold is None else threshold
        self.date_tolerance_days = (
            self.DATE_TOLERANCE_DAYS if date_tolerance_days is None else date_tolerance_days
        )
        self.date_weight = self.DATE_WEIGHT if date_weight is None else date_weight
        self.amount_weight = self.AMOUNT_WEIGHT if amount_weight is None else amount_weight
        self.merchant_weight = self.MERCHANT_WEIGHT if merchant_weight is None else merchant_weight

    def check_duplicate(
        self, parsed: ParsedTransaction, existing_transactions: Iterable[Transaction]
    ) -> DuplicateCheckResult:
        """Check one parsed row against stored transactions.

        Args:
            parsed: Row parsed from the CSV
            existing_transactions: Stored transactions of the target account

        Returns:
            Result naming the single best match, if any
        """
        existing_transactions = list(existing_transactions)

        for existing in existing_transactions:
            if self.is_exact_match(parsed, existing):
                return DuplicateCheckResult(
                    is_duplicate=True, confidence=1.0, matched_transaction_id=existing.id
                )

        best: Optional[Transaction] = None
        best_score = 0.0
        for existing in existing_transactions:
            score = self.similarity(parsed, existing)
            if score > self.threshold and score > best_score:
                best, best_score = existing, score

        if best is None:
            return DuplicateCheckResult(is_duplicate=False, confidence=0.0)
        return DuplicateCheckResult(
            is_duplicate=True,
            confidence=min(round(best_score, 4), 1.0),
            matched_transaction_id=best.id,
        )

    def check_duplicates(
        self,
        parsed_transactions: list[ParsedTransaction],
        existing_transactions: Iterable[Transaction],
    ) -> list[tuple[ParsedTransaction, DuplicateCheckResult]]:
        """Check every parsed row independently, keeping input order."""
        existing_transactions = list(existing_transactions)
        return [
            (parsed, self.check_duplicate(parsed, existing_transactions))
            for parsed in parsed_transactions
        ]

    def find_internal_duplicates(self, parsed_transactions: list[ParsedTransaction]) -> set[str]:
        """Find rows repeated within the same batch.

        Returns:
            IDs of every later row whose date, amount and merchant (ignoring
            case) equal an earlier row. First occurrences are never included.
        """
        return set(self.match_internal_duplicates(parsed_transactions))

    def match_internal_duplicates(
        self, parsed_transactions: list[ParsedTransaction]
    ) -> dict[str, str]:
        """Map each repeated row ID to the ID of its first occurrence in the batch."""
        first_ids: dict[str, str] = {}
        matches: dict[str, str] = {}
        for parsed in parsed_transactions:
            fingerprint = parsed.fingerprint()
            if fingerprint in first_ids:
                matches[parsed.id] = first_ids[fingerprint]
            else:
                first_ids[fingerprint] = parsed.id
        return matches

    def classify_batch(
        self,
        parsed_transactions: list[ParsedTransaction],
        existing_transactions: Iterable[Transaction],
    ) -> list[tuple[ParsedTransaction, DuplicateCheckResult]]:
        """Check rows against stored transactions and against each other.

        A row matching a stored transaction keeps that match. Otherwise a
        repeat of an earlier row in the batch is a duplicate of that row
        with confidence 1.0.
        """
        internal = self.match_internal_duplicates(parsed_transactions)
        results = []
        for parsed, check in self.check_duplicates(parsed_transactions, existing_transactions):
            if not check.is_duplicate and parsed.id in internal:
                check = DuplicateCheckResult(
                    is_duplicate=True, confidence=1.0, matched_transaction_id=internal[parsed.id]
                )
            results.append((parsed, check))
        return results

    @staticmethod
    def is_exact_match(parsed: ParsedTransaction, existing: Transaction) -> bool:
        return (
            parsed.date == existing.date
            and parsed.amount == existing.amount
            and parsed.merchant.strip().lower() == existing.merchant.strip().lower()
        )

    def similarity(self, parsed: ParsedTransaction, existing: Transaction) -> float:
        """Weighted similarity score between 0.0 and 1.0."""
        score = 0.0

        days_apart = abs((parsed.date - existing.date).days)
        if days_apart <= self.date_tolerance_days:
            score += self.date_weight * (1 - days_apart / (self.date_tolerance_days + 1))

        if parsed.amount == existing.amount:
            score += self.amount_weight

        score += self.merchant_weight * string_similarity(
            parsed.merchant.strip().lower(), existing.merchant.strip().lower()
        )
        return score
