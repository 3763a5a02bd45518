from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from classscan.config import load_config
from classscan.errors import ClassScanError
from classscan.index import analyze_repository
from classscan.model import AnalyzeResult, SortMetric
from classscan.summarize import filter_files, sort_files


app = FastAPI(title="Class Complexity Scanner")


class AnalyzeRequest(BaseModel):
	root_path: str
	sort: SortMetric = SortMetric.CLASS_COMPLEXITY
	query: Optional[str] = None
	top: Optional[int] = None


@app.post("/analyze", response_model=AnalyzeResult)
def analyze(req: AnalyzeRequest) -> AnalyzeResult:
	root = os.path.abspath(req.root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")

	try:
		config = load_config(sort_metric=req.sort, top_files=req.top)
		result = analyze_repository(root, config)
	except ClassScanError as e:
		raise HTTPException(status_code=422, detail=str(e))

	files = sort_files(filter_files(result.files, req.query), result.index, config.sort_metric)
	if req.top is not None:
		files = files[: config.top_files]
	return AnalyzeResult(index=result.index, files=files)
