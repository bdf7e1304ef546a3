"""Holdings valuation for the crypto/stock tracker"""

from typing import Iterable

from wallet_ledger.domain.models import ZERO, CryptoAsset, PortfolioSummary, Stock


def portfolio_summary(crypto: Iterable[CryptoAsset], stocks: Iterable[Stock]) -> PortfolioSummary:
    return PortfolioSummary(
        crypto_value=sum((a.value for a in crypto), ZERO),
        stock_value=sum((s.value for s in stocks), ZERO),
    )
