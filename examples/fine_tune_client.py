#!/usr/bin/env python3
"""
Example client for Finetune Studio
Demonstrates how to use the API to start a fine-tuning job and follow it
"""

import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests

TERMINAL_STATUSES = ("succeeded", "failed", "cancelled")


class FineTuneClient:
    """Client for interacting with the Finetune Studio API"""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = f"{base_url.rstrip('/')}/api/v1"

    def create_job(
        self,
        model: str,
        training_file: Path,
        validation_file: Optional[Path] = None,
        **hyperparameters: Any,
    ) -> Dict[str, Any]:
        """
        Upload datasets and start a job

        Args:
            model: Base model identifier
            training_file: Path to the training JSONL file
            validation_file: Optional path to a validation JSONL file
            **hyperparameters: Form fields such as batchSize, learningRate, nEpochs

        Returns:
            Response body with the created job
        """
        files = {"trainingFile": (training_file.name, training_file.read_bytes(), "application/jsonl")}
        if validation_file:
            files["validationFile"] = (validation_file.name, validation_file.read_bytes(), "application/jsonl")

        data = {"model": model, **{key: str(value) for key, value in hyperparameters.items()}}
        response = requests.post(f"{self.base_url}/fine-tune", data=data, files=files, timeout=600)
        response.raise_for_status()
        return response.json()

    def _read(self, job_id: str, action: str, **params: str) -> Dict[str, Any]:
        response = requests.get(
            f"{self.base_url}/fine-tune", params={"jobId": job_id, "action": action, **params}, timeout=30
        )
        response.raise_for_status()
        return response.json()

    def get_status(self, job_id: str) -> Dict[str, Any]:
        """Get status of a job"""
        return self._read(job_id, "status")["status"]

    def get_events(self, job_id: str) -> list:
        """Get the event log of a job"""
        return self._read(job_id, "events")["events"]

    def get_checkpoints(self, job_id: str) -> list:
        """Get the checkpoints of a job"""
        return self._read(job_id, "checkpoints")["checkpoints"]

    def download(self, job_id: str, file_id: str, filename: str) -> str:
        """Ask the server to download a checkpoint file; returns the server-side path"""
        return self._read(job_id, "download", fileId=file_id, filename=filename)["filePath"]

    def wait_for_job(self, job_id: str, check_interval: int = 30, timeout: int = 3600) -> str:
        """
        Wait for a job to finish

        Args:
            job_id: Provider job id
            check_interval: Seconds between status checks
            timeout: Maximum seconds to wait

        Returns:
            Final job status
        """
        start_time = time.time()

        while True:
            if time.time() - start_time > timeout:
                raise TimeoutError(f"Job {job_id} did not finish within {timeout} seconds")

            status = self.get_status(job_id)["status"]
            print(f"Job {job_id} status: {status}")

            if status in TERMINAL_STATUSES:
                return status

            time.sleep(check_interval)


def main():
    """Example usage"""
    if len(sys.argv) < 3:
        print("Usage: fine_tune_client.py <model> <training.jsonl> [validation.jsonl]")
        return

    client = FineTuneClient("http://localhost:8000")
    validation = Path(sys.argv[3]) if len(sys.argv) > 3 else None

    print("\n=== Create Fine-tuning Job ===")
    try:
        result = client.create_job(sys.argv[1], Path(sys.argv[2]), validation, nEpochs=1, batchSize=4)
    except requests.exceptions.HTTPError as e:
        body = e.response.json() if e.response is not None else {}
        print(f"✗ Failed to create job: {body.get('message', e)}")
        if e.response is not None and e.response.status_code == 409:
            print(body.get("hint", "The file is still being processed, try again shortly."))
        return

    job_id = result["job"]["jobId"]
    print(f"✓ Job created: {job_id} (request {result['requestId']})")

    print("\n=== Wait for Completion ===")
    final_status = client.wait_for_job(job_id)
    print(f"Job finished with status: {final_status}")

    print("\n=== Events ===")
    for event in client.get_events(job_id)[-10:]:
        print(f"  [{event['level']}] {event['message']}")

    print("\n=== Checkpoints ===")
    for checkpoint in client.get_checkpoints(job_id):
        for file_id in checkpoint.get("result_files", []):
            path = client.download(job_id, file_id, f"{checkpoint['id']}-{file_id}")
            print(f"  {checkpoint['id']}: {file_id} -> {path}")


if __name__ == "__main__":
    main()
