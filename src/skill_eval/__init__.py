"""
skill_eval — Skill Assessment Creation & Scoring
================================================
Define a role/skill profile, generate a question set for it, answer the
questions, and score the answers into a skill-by-skill report.

Module map
----------
  models.py          Enums, RequirementProfile (Pydantic), entity dataclasses.
  errors.py          Typed error taxonomy.
  config.py          Settings loaded from .env; live vs mock backend detection.
  slot_planner.py    Profile → ordered question slots (round-robin).
  question_set.py    Slots → generated questions + test metadata.
  scorer.py          Per-answer scoring with clamping and failure fallback.
  aggregator.py      Per-skill score aggregation and rating labels.
  report.py          Overall score, strengths, weaknesses, recommendations.
  repository.py      Persistence boundary (in-memory / SQLite).
  service.py         Workflow orchestration over repository + backends.
  analytics.py       Cross-attempt analytics and data export.
  cli.py             Rich-based interactive CLI (`skill-eval`).
  backends/          QuestionGenerator / AnswerEvaluator implementations.

Pipeline order
--------------
  RequirementProfile → plan_slots → generator.generate (per slot)
  → GeneratedTest  ** user answers **
  → score_attempt (parallel, per question) → aggregate_by_skill
  → synthesize → EvaluationResult attached to the Attempt
"""
__version__ = "0.1.0"
