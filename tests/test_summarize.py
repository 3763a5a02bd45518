from classscan.model import (
	AnalyzeResult,
	ClassInfo,
	FileFacts,
	FunctionInfo,
	SortMetric,
	Stmt,
	StmtKind,
)
from classscan.summarize import filter_files, sort_files, summarize_file, summarize_report


def ifs(n):
	return [Stmt(kind=StmtKind.IF, line=i) for i in range(n)]


def make_result():
	alpha = ClassInfo(
		name="App\\Alpha",
		functions=[FunctionInfo(name="a", stmts=ifs(4)), FunctionInfo(name="b")],
		dependencies=["App\\Beta"],
	)
	beta = ClassInfo(
		name="App\\Beta",
		functions=[FunctionInfo(name="a", stmts=ifs(1))],
		dependencies=["App\\Gamma", "App\\Delta", "App\\Alpha"],
	)
	gamma = ClassInfo(
		name="App\\Gamma",
		functions=[FunctionInfo(name="__construct", stmts=ifs(9))],
	)
	files = [
		FileFacts(path="alpha.php", class_info=alpha, lines=10, last_accessed=1),
		FileFacts(path="beta.php", class_info=beta, lines=20, last_accessed=2),
		FileFacts(path="gamma.php", class_info=gamma, lines=30, last_accessed=3),
	]
	index = {"App\\Alpha": 1, "App\\Beta": 1, "App\\Gamma": 4, "App\\Delta": 1}
	return AnalyzeResult(index=index, files=files)


def names(files):
	return [f.class_info.name.split("\\")[-1] for f in files]


def test_sort_by_each_metric():
	result = make_result()
	assert names(sort_files(result.files, result.index, SortMetric.CLASS_COMPLEXITY)) == [
		"Alpha",
		"Beta",
		"Gamma",
	]
	assert names(sort_files(result.files, result.index, SortMetric.USES)) == ["Gamma", "Alpha", "Beta"]
	assert names(sort_files(result.files, result.index, SortMetric.DEPENDENCIES)) == [
		"Beta",
		"Alpha",
		"Gamma",
	]
	assert names(sort_files(result.files, result.index, SortMetric.FUNCTION_COMPLEXITY)) == [
		"Gamma",
		"Alpha",
		"Beta",
	]


def test_filter_is_case_insensitive_substring():
	result = make_result()
	assert names(filter_files(result.files, "ALP")) == ["Alpha"]
	assert names(filter_files(result.files, "app\\")) == ["Alpha", "Beta", "Gamma"]
	assert names(filter_files(result.files, None)) == ["Alpha", "Beta", "Gamma"]
	assert filter_files(result.files, "zzz") == []


def test_summarize_file():
	result = make_result()
	text = summarize_file(result.files[2], result.index)
	assert text.startswith("App\\Gamma")
	assert "Uses: 4" in text
	assert "No dependencies" in text
	assert "Average cyclomatic complexity: 0.00" in text
	assert "Max cyclomatic complexity: 10" in text
	# constructors are reported as returning self
	assert "Return type: self" in text


def test_summarize_file_without_statements_or_dependencies():
	result = make_result()
	text = summarize_file(
		result.files[1], result.index, show_dependencies=False, show_statements=False
	)
	assert "App\\Gamma" not in text
	assert "if (line" not in text
	assert "Return type: Not provided" in text


def test_report_respects_top_and_query():
	result = make_result()
	report = summarize_report(result, metric=SortMetric.USES, top=1)
	assert report.startswith("Top files by uses")
	assert "1. App\\Gamma" in report
	assert "App\\Alpha\n" not in report

	assert summarize_report(result, query="nothing") == "No matching classes"
