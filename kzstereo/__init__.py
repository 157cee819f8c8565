"""kzstereo: cost weight normalization for Kolmogorov-Zabih graph-cut stereo.

Main Components:
- parameters: fraction decoding, rescaling, derivation and reduction of the weights
- solvers: solver contract and the Match image-statistics front end
- io: image pair loading and disparity map writers
- pipelines: StereoMatchPipeline orchestrating one run
- cli: command line entry point

Usage:
    from kzstereo.pipelines import MatchConfig, StereoMatchPipeline

    config = MatchConfig(left_path=Path("im1.png"), right_path=Path("im2.png"), d_min=-15, d_max=0)
    result = StereoMatchPipeline(config=config).run()
    print(result)
"""

__version__ = "0.1.0"
