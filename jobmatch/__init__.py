"""Résumé profile extraction and job match scoring."""
from jobmatch.errors import JobMatchError, LexiconError, ParseError
from jobmatch.matcher import match_jobs, score_job
from jobmatch.models import CandidateProfile, JobPosting, MatchResult, ScoredJob
from jobmatch.resume_parser import extract_profile, parse_resume

__all__ = [
    "CandidateProfile", "JobPosting", "MatchResult", "ScoredJob",
    "JobMatchError", "LexiconError", "ParseError",
    "extract_profile", "parse_resume", "match_jobs", "score_job",
]

__version__ = "0.1.0"
