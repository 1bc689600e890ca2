"""
Schedule seed data.

Raw milestone definitions per domain. Offsets are months of age for the
immunization schedule and weeks of gestation for the prenatal checkup and
pregnancy milestone timelines. Entries are declared in chronological order;
the evaluator sorts by offset and keeps declared order within an offset.

These dicts are validated once by ``templates.load_template``.
"""

# =============================================================================
# Immunization: Sri Lanka National Immunization Programme
# =============================================================================

VACCINATION_SCHEDULE_VERSION = 1

VACCINATION_MILESTONES = [
    # Birth
    {
        "milestone_id": "bcg",
        "offset": 0,
        "label": "BCG",
        "short_label": "BCG",
        "description": "Bacillus Calmette-Guerin vaccine for tuberculosis protection",
        "group": "At birth",
    },
    {
        "milestone_id": "opv0",
        "offset": 0,
        "label": "Oral Polio Vaccine (Birth dose)",
        "short_label": "OPV-0",
        "description": "Birth dose of oral polio vaccine",
        "group": "At birth",
    },
    {
        "milestone_id": "hepb0",
        "offset": 0,
        "label": "Hepatitis B (Birth dose)",
        "short_label": "Hep B",
        "description": "Hepatitis B vaccine birth dose",
        "group": "At birth",
    },
    # 2 months
    {
        "milestone_id": "penta1",
        "offset": 2,
        "label": "Pentavalent Vaccine (1st dose)",
        "short_label": "Pentavalent-1",
        "description": "DTP + Hep B + Hib combination vaccine",
        "group": "2 months",
    },
    {
        "milestone_id": "opv1",
        "offset": 2,
        "label": "Oral Polio Vaccine (1st dose)",
        "short_label": "OPV-1",
        "description": "First dose of oral polio vaccine",
        "group": "2 months",
    },
    {
        "milestone_id": "pcv1",
        "offset": 2,
        "label": "Pneumococcal Vaccine (1st dose)",
        "short_label": "PCV-1",
        "description": "Pneumococcal conjugate vaccine",
        "group": "2 months",
    },
    # 4 months
    {
        "milestone_id": "penta2",
        "offset": 4,
        "label": "Pentavalent Vaccine (2nd dose)",
        "short_label": "Pentavalent-2",
        "description": "DTP + Hep B + Hib combination vaccine",
        "group": "4 months",
    },
    {
        "milestone_id": "opv2",
        "offset": 4,
        "label": "Oral Polio Vaccine (2nd dose)",
        "short_label": "OPV-2",
        "description": "Second dose of oral polio vaccine",
        "group": "4 months",
    },
    {
        "milestone_id": "pcv2",
        "offset": 4,
        "label": "Pneumococcal Vaccine (2nd dose)",
        "short_label": "PCV-2",
        "description": "Pneumococcal conjugate vaccine",
        "group": "4 months",
    },
    # 6 months
    {
        "milestone_id": "penta3",
        "offset": 6,
        "label": "Pentavalent Vaccine (3rd dose)",
        "short_label": "Pentavalent-3",
        "description": "DTP + Hep B + Hib combination vaccine",
        "group": "6 months",
    },
    {
        "milestone_id": "opv3",
        "offset": 6,
        "label": "Oral Polio Vaccine (3rd dose)",
        "short_label": "OPV-3",
        "description": "Third dose of oral polio vaccine",
        "group": "6 months",
    },
    {
        "milestone_id": "pcv3",
        "offset": 6,
        "label": "Pneumococcal Vaccine (3rd dose)",
        "short_label": "PCV-3",
        "description": "Pneumococcal conjugate vaccine",
        "group": "6 months",
    },
    # 9 months
    {
        "milestone_id": "measles1",
        "offset": 9,
        "label": "Measles Vaccine (1st dose)",
        "short_label": "Measles-1",
        "description": "First dose of measles vaccine",
        "group": "9 months",
    },
    # 12 months
    {
        "milestone_id": "mmr",
        "offset": 12,
        "label": "MMR Vaccine",
        "short_label": "MMR",
        "description": "Measles, Mumps, Rubella combination vaccine",
        "group": "12 months",
    },
    {
        "milestone_id": "je",
        "offset": 12,
        "label": "Japanese Encephalitis Vaccine",
        "short_label": "JE",
        "description": "Japanese Encephalitis vaccine",
        "group": "12 months",
    },
    # 18 months
    {
        "milestone_id": "dpt_booster",
        "offset": 18,
        "label": "DPT Booster",
        "short_label": "DPT Booster",
        "description": "Diphtheria, Pertussis, Tetanus booster",
        "group": "18 months",
    },
    {
        "milestone_id": "opv_booster",
        "offset": 18,
        "label": "OPV Booster",
        "short_label": "OPV Booster",
        "description": "Oral Polio Vaccine booster",
        "group": "18 months",
    },
    {
        "milestone_id": "measles2",
        "offset": 18,
        "label": "Measles Vaccine (2nd dose)",
        "short_label": "Measles-2",
        "description": "Second dose of measles vaccine",
        "group": "18 months",
    },
]

# =============================================================================
# Prenatal checkups
# =============================================================================

PRENATAL_CHECKUP_SCHEDULE_VERSION = 1

PRENATAL_CHECKUP_MILESTONES = [
    {
        "milestone_id": "anc_w08",
        "offset": 8,
        "label": "First Prenatal Visit",
        "description": "Initial exam, medical history, blood tests",
        "group": "1st trimester",
    },
    {
        "milestone_id": "anc_w12",
        "offset": 12,
        "label": "First Trimester Screening",
        "description": "Nuchal translucency scan, blood tests",
        "group": "1st trimester",
    },
    {
        "milestone_id": "anc_w16",
        "offset": 16,
        "label": "Second Trimester Visit",
        "description": "Routine checkup, fundal height measurement",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "anc_w20",
        "offset": 20,
        "label": "Anatomy Scan",
        "description": "Detailed ultrasound to check baby's development",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "anc_w24",
        "offset": 24,
        "label": "Glucose Screening",
        "description": "Gestational diabetes test",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "anc_w28",
        "offset": 28,
        "label": "Third Trimester Begins",
        "description": "Routine checkup, Rh antibody test",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w30",
        "offset": 30,
        "label": "Growth Check",
        "description": "Monitor baby's growth and position",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w32",
        "offset": 32,
        "label": "Routine Visit",
        "description": "Blood pressure, weight, fundal height",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w34",
        "offset": 34,
        "label": "Group B Strep Test",
        "description": "Screening for GBS bacteria",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w36",
        "offset": 36,
        "label": "Weekly Visits Begin",
        "description": "Check baby's position, cervix",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w38",
        "offset": 38,
        "label": "Pre-delivery Check",
        "description": "Discuss birth plan, check readiness",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "anc_w40",
        "offset": 40,
        "label": "Due Date",
        "description": "Full term",
        "group": "3rd trimester",
    },
]

# =============================================================================
# Pregnancy milestones
# =============================================================================

PREGNANCY_MILESTONE_SCHEDULE_VERSION = 1

PREGNANCY_MILESTONES = [
    {
        "milestone_id": "implantation",
        "offset": 4,
        "label": "Fertilization & Implantation",
        "short_label": "Implantation",
        "description": "A tiny ball of cells begins to implant in the uterus",
        "group": "1st trimester",
    },
    {
        "milestone_id": "heartbeat",
        "offset": 8,
        "label": "Embryonic Development",
        "short_label": "Heartbeat",
        "description": "Major organs are forming and the heart begins to beat",
        "group": "1st trimester",
    },
    {
        "milestone_id": "first_trimester_end",
        "offset": 12,
        "label": "End of First Trimester",
        "short_label": "Trimester 1",
        "description": "All essential organs are present",
        "group": "1st trimester",
    },
    {
        "milestone_id": "second_trimester",
        "offset": 16,
        "label": "Second Trimester Begins",
        "short_label": "Trimester 2",
        "description": "Facial expressions appear and first movements may soon be felt",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "halfway",
        "offset": 20,
        "label": "Halfway There",
        "short_label": "Halfway",
        "description": "Baby is very active",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "viability",
        "offset": 24,
        "label": "Viability Milestone",
        "short_label": "Viability",
        "description": "Lungs are developing and baby responds to sounds",
        "group": "2nd trimester",
    },
    {
        "milestone_id": "third_trimester",
        "offset": 28,
        "label": "Third Trimester Starts",
        "short_label": "Trimester 3",
        "description": "Eyes open and sleep cycles become regular",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "rapid_growth",
        "offset": 32,
        "label": "Rapid Growth Phase",
        "short_label": "Growth",
        "description": "Baby practises breathing and bones harden",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "almost_full_term",
        "offset": 36,
        "label": "Almost Full Term",
        "short_label": "Week 36",
        "description": "Most babies turn head-down in preparation for birth",
        "group": "3rd trimester",
    },
    {
        "milestone_id": "full_term",
        "offset": 40,
        "label": "Full Term",
        "short_label": "Full term",
        "description": "Baby is fully developed",
        "group": "3rd trimester",
    },
]
