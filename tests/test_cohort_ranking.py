from resultdesk.services.cohort_ranking import rank_cohort, top_performers


def test_ranks_are_ordinal(make_student):
    cohort = [
        make_student("Asha", "R001", {"Maths": 85}),
        make_student("Bala", "R002", {"Maths": 85}),
        make_student("Chitra", "R003", {"Maths": 75}),
    ]
    assert [a.sgpa for a in cohort] == [9.0, 9.0, 8.0]

    ranked = rank_cohort(cohort)

    assert [r.rank for r in ranked] == [1, 2, 3]


def test_ranking_keeps_submission_order(make_student):
    cohort = [
        make_student("Asha", "R001", {"Maths": 75}),
        make_student("Bala", "R002", {"Maths": 95}),
        make_student("Chitra", "R003", {"Maths": 85}),
        make_student("Devi", "R004", {"Maths": 95}),
    ]

    ranked = rank_cohort(cohort)

    assert [r.aggregate.student_info.roll_number for r in ranked] == ["R001", "R002", "R003", "R004"]
    assert [r.rank for r in ranked] == [4, 1, 3, 2]
    # the aggregates themselves are shared, not copied or modified
    assert all(r.aggregate is a for r, a in zip(ranked, cohort))


def test_rank_empty_cohort():
    assert rank_cohort([]) == []


def test_top_performers(make_student):
    cohort = [
        make_student("Asha", "R001", {"Maths": 75}),
        make_student("Bala", "R002", {"Maths": 95}),
        make_student("Chitra", "R003", {"Maths": 85}),
    ]

    top = top_performers(rank_cohort(cohort), limit=2)

    assert [(t.aggregate.student_info.name, t.rank) for t in top] == [("Bala", 1), ("Chitra", 2)]
