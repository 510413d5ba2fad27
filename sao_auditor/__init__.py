"""
SAO Auditor

Search & AI-discovery readiness auditor that:
1. Collects keyword and backlink metrics through cascading provider fallback
   (Ahrefs, DataForSEO, Google Search Console, Moz, heuristic estimates)
2. Inspects the page itself and its Core Web Vitals
3. Scores the result across five capped pillars
4. Aggregates per-URL scores into domain averages and competitor comparisons
"""

__version__ = "0.1.0"
