"""Main script for running the influencer trust tracker interactively."""

import asyncio
import logging

from .domain.errors import InfluencerTrustError
from .domain.models.analysis import AnalysisRequest, RecencyFilter
from .infrastructure.dependencies import ServiceContainer


async def main():
    """Verify and analyze influencers from the command line."""
    logging.basicConfig(level=logging.WARNING)
    print("Influencer Trust - health claim verification")
    print("--------------------------------------------")

    container = ServiceContainer()
    await container.initialize()
    verification_service = await container.get_verification_service()
    pipeline = await container.get_analysis_pipeline()

    try:
        while True:
            name = input("\nEnter an influencer name (or 'quit' to exit): ").strip()
            if name.lower() in ('quit', 'exit', 'q'):
                break
            if not name:
                continue

            print("\nVerifying influencer...")
            try:
                verification = await verification_service.verify(name)
                print(f"Tracked as: {verification.canonical_name}")

                print("Analyzing recent claims...")
                report = await pipeline.run(
                    AnalysisRequest(
                        influencer_name=verification.canonical_name,
                        recency_filter=RecencyFilter.MONTH,
                    )
                )

                print(f"\n{report.message}")
                print(f"New claims found: {report.new_claims_found}")
                print(f"Unique claims: {report.new_unique_claims}")
                print(
                    f"Verified / Questionable / Debunked: "
                    f"{report.new_verified} / {report.new_questionable} / {report.new_debunked}"
                )
                if report.trust_score is not None:
                    print(f"Trust score: {report.trust_score:.2f}")

                for i, record in enumerate(report.details, 1):
                    print(f"{i}. [{record.status.value}] {record.claim_text}")

            except InfluencerTrustError as e:
                print(f"\nError: {e.message}")

    finally:
        # Clean up
        await container.shutdown()


def run():
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
