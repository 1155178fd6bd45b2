"""Prompt builders for the research provider."""

import json
from typing import List

JSON_RULES = """Rules:
- Answer with valid JSON only: no code blocks, no backticks, no commentary.
- Use plain ASCII double quotes and hyphens, never typographic quotes or dashes.
- No trailing commas and no // or /* */ comments.
- Numbers are plain integers or decimals without separators."""


def verify_influencer_prompt(influencer_name: str) -> str:
    """Ask whether a person is a health influencer and who they are."""
    return f"""INFLUENCER VERIFICATION
Determine whether the following person is a health influencer.
Identify their canonical professional name and every known variation of it,
their verified social accounts and combined follower count, their credentials
checked against reliable sources, and the health topics they cover.

Person: {influencer_name}

Return one JSON object with exactly this structure:
{{
  "canonicalName": string,
  "knownAliases": string[],
  "isHealthInfluencer": boolean,
  "confidence": integer 0-100,
  "platformHandles": {{"twitter": string | null, "instagram": string | null, "youtube": string | null}},
  "credentials": string[],
  "categories": string[],
  "approximateFollowers": integer | null
}}

{JSON_RULES}
- Unknown handles and numbers are null; empty lists are [].
"""


def recent_claims_prompt(influencer_name: str, limit: int) -> str:
    """Ask for up to ``limit`` recent, testable health claims."""
    return f"""RECENT HEALTH CLAIMS
Gather at most {limit} recent, distinct health-related statements made by {influencer_name}.
Only include statements about diet, nutrition, fitness, mental health,
supplementation, or medical and scientific interventions.
Leave out commentary that cannot be tested scientifically, such as rankings,
personal achievements or guest announcements.
Never repeat semantically identical statements and do not include URLs.

Return a JSON array, one object per statement:
[{{"claim_text": string, "source_content": string | null, "source_platform": string | null, "found_date": string | null}}]
If nothing qualifies, return [].

{JSON_RULES}
"""


def dedup_prompt(new_claims: List[str], existing_claims: List[str]) -> str:
    """Ask which new claims semantically duplicate existing ones."""
    return f"""DUPLICATE DETECTION
Compare every entry of newClaims against existingClaims and flag semantic duplicates.
newClaims = {json.dumps(new_claims)}
existingClaims = {json.dumps(existing_claims)}

Return a JSON array with one object per new claim:
[{{"new_claim_text": exact text from newClaims, "is_duplicate": boolean,
  "matched_existing_claim_text": exact text from existingClaims or null,
  "similarity_score": number between 0.0 and 1.0}}]

Scoring: 1.0 means identical meaning; 0.8 or more is a probable duplicate.
Set is_duplicate to true exactly when similarity_score is 0.8 or more.
If no valid answer can be produced, return [].

{JSON_RULES}
"""


def classification_prompt(claims: List[str], selected_journals: List[str]) -> str:
    """Ask for status, category, confidence and journal evidence per claim."""
    return f"""CLAIM CLASSIFICATION
Classify each scientific claim using evidence from these journals: {json.dumps(selected_journals)}
Claims to classify: {json.dumps(claims)}

Return a JSON array with one object per claim:
[{{"claim_text": exact claim text as provided,
  "status": one of ["Verified", "Questionable", "Debunked"],
  "category": one of ["Sleep", "Performance", "Hormones", "Stress", "Nutrition", "Exercise",
                      "Cognition", "Motivation", "Recovery", "Mental Health", "Other"],
  "confidence_score": integer 0-100,
  "journals_supporting": journal names that validate the claim,
  "journals_questioning": journal names with mixed or partial support,
  "journals_contradicting": journal names that dispute the claim}}]
Use "Other" when no category fits. Use [] for empty journal lists.
If no valid answer can be produced, return [].

{JSON_RULES}
"""
