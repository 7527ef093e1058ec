import numpy as np
import pandas as pd
import pytest

from cdsga.instance import (
    DEFAULT_PROCESSING_TIMES,
    Instance,
    NoJobsSelected,
    as_matrix,
    attach_quantities,
    expand_jobs,
    load_quantities,
    read_instances,
    read_raw_instance,
)


def test_expand_jobs_groups_by_type():
    assert expand_jobs([2, 0, 1]).tolist() == [0, 0, 2]
    assert expand_jobs([0, 3]).tolist() == [1, 1, 1]


def test_expand_jobs_all_zero_raises():
    with pytest.raises(NoJobsSelected):
        expand_jobs([0, 0, 0])
    with pytest.raises(ValueError):
        expand_jobs([])


def test_default_instance_matches_builtin_matrix(default_inst):
    assert default_inst.n_jobs == 5
    assert default_inst.n_machines == 10
    assert default_inst.p_times.tolist() == [list(r) for r in DEFAULT_PROCESSING_TIMES]


def test_as_matrix_rejects_bad_shapes():
    with pytest.raises(ValueError):
        as_matrix([1, 2, 3])
    with pytest.raises(ValueError):
        as_matrix([[1, -1]])


def test_read_raw_instance_plain(tmp_path):
    path = tmp_path / "tiny.txt"
    path.write_text("2 3\n1 2 3\n4 5 6\n")
    inst = read_raw_instance(str(path))
    assert inst.name == "tiny"
    assert inst.p_times.tolist() == [[1, 2, 3], [4, 5, 6]]


def test_read_raw_instance_machine_time_pairs(tmp_path):
    path = tmp_path / "pairs.txt"
    # one-based machine ids, listed out of order on the first row
    path.write_text("2 2\n2 5 1 3\n1 4 2 6\n")
    inst = read_raw_instance(str(path))
    assert inst.p_times.tolist() == [[3, 5], [4, 6]]


def test_read_raw_instance_bad_rows(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("2 3\n1 2\n4 5 6\n")
    with pytest.raises(ValueError):
        read_raw_instance(str(path))


def test_read_instances_from_workbook(tmp_path):
    path = tmp_path / "instances.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([[2, 3, None], [1, 2, 3], [4, 5, 6]]).to_excel(
            writer, sheet_name="small", header=False, index=False
        )
        pd.DataFrame([[1, 2], [7, 8]]).to_excel(writer, sheet_name="single", header=False, index=False)
    insts = read_instances(str(path))
    assert list(insts) == ["small", "single"]
    assert insts["small"].p_times.tolist() == [[1, 2, 3], [4, 5, 6]]
    assert insts["single"].p_times.tolist() == [[7, 8]]


def test_load_and_attach_quantities(tmp_path):
    path = tmp_path / "quantities.csv"
    path.write_text("instance,job,quantity\na,1,2\na,3,1\nb,2,4\n")
    q = load_quantities(str(path))
    assert q == {"a": [2, 0, 1], "b": [0, 4]}

    insts = {
        "a": Instance(name="a", p_times=np.ones((4, 2), dtype=np.int64)),
        "b": Instance(name="b", p_times=np.ones((2, 2), dtype=np.int64)),
    }
    attach_quantities(insts, q)
    assert insts["a"].quantities == [2, 0, 1, 0]
    assert insts["b"].quantities == [0, 4]


def test_attach_quantities_too_many_for_instance():
    insts = {"a": Instance(name="a", p_times=np.ones((1, 2), dtype=np.int64))}
    with pytest.raises(ValueError):
        attach_quantities(insts, {"a": [1, 1]})
