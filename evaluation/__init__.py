"""
Quality metrics for colour transfer results.

- metrics: PSNR/SSIM against the target and log-space statistics distance
  to the reference
"""
