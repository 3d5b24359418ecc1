"""
Finger Tap - Live tap detection from a webcam.

This is the main entry point: it tracks the index fingertip with MediaPipe,
runs the windowed tap classifier on every frame and flashes an indicator on
the video when a tap is detected.
"""

import argparse
import logging
import signal
import sys
import threading

import cv2 as cv

from fingertap.config import CameraConfig, InferenceConfig, TapDetectionConfig, LOG_FORMAT, LOG_LEVEL
from fingertap.core.detection_loop import TapDetectionLoop
from fingertap.detection.fingertip_sensor import MediaPipeFingertipSensor
from fingertap.inference import InferenceAdapter, ModelLoadError, OnnxRuntimeBackend
from fingertap.ui.indicator import FrameOverlayIndicator

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """
    Parse command line arguments.

    Args:
        argv (list, optional): Arguments to parse. If None, uses sys.argv

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Finger Tap - live tap detection')
    parser.add_argument('--model', help='Path to the ONNX tap classifier',
                        default=InferenceConfig.MODEL_PATH)
    parser.add_argument('--camera', type=int, default=0,
                        help='Camera port')
    parser.add_argument('--threshold', type=float, default=TapDetectionConfig.DETECTION_THRESHOLD,
                        help='Detection threshold in [0, 1]')
    parser.add_argument('--axis', type=int, choices=[0, 1, 2], default=TapDetectionConfig.TRACKED_AXIS,
                        help='Tracked axis (0=x, 1=y, 2=z)')
    parser.add_argument('--cpu-only', action='store_true',
                        help='Skip accelerated execution providers')
    parser.add_argument('--headless', action='store_true',
                        help='Run without a display window')
    parser.add_argument('--log-level', default=logging.getLevelName(LOG_LEVEL),
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser.parse_args(argv)


def setup_camera(cam_port):
    """
    Initialize and configure the camera.

    Args:
        cam_port (int): Camera port number

    Returns:
        cv.VideoCapture: Configured camera capture object
    """
    logger.info(f"Setting up camera on port {cam_port}")
    cap = cv.VideoCapture(cam_port)
    cap.set(cv.CAP_PROP_BUFFERSIZE, CameraConfig.BUFFER_SIZE)
    cap.set(cv.CAP_PROP_FRAME_WIDTH, CameraConfig.DEFAULT_WIDTH)
    cap.set(cv.CAP_PROP_FRAME_HEIGHT, CameraConfig.DEFAULT_HEIGHT)
    return cap


def setup_signal_handler(stop_event):
    """
    Stop the main loop on SIGINT / SIGTERM.

    Args:
        stop_event (threading.Event): Event set when a signal arrives
    """
    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def build_loop(args, sensor, indicator):
    """
    Create the detection loop and load the classifier.

    Args:
        args (argparse.Namespace): Parsed arguments
        sensor (MediaPipeFingertipSensor): Fingertip source
        indicator (FrameOverlayIndicator): Tap indicator

    Returns:
        TapDetectionLoop: Started loop

    Raises:
        ModelLoadError: If the classifier cannot be loaded
    """
    providers = [InferenceConfig.FALLBACK_PROVIDER] if args.cpu_only else None
    adapter = InferenceAdapter(OnnxRuntimeBackend(providers=providers))
    loop = TapDetectionLoop(sensor, adapter, indicator, threshold=args.threshold, axis=args.axis)
    try:
        loop.start(args.model)
    except ModelLoadError:
        loop.close()
        raise
    return loop


def run_main_loop(cap, sensor, loop, indicator, stop_event, headless=False):
    """
    Read frames, update the sensor and tick the detector until stopped or the camera fails.

    Args:
        cap: Camera capture object
        sensor (MediaPipeFingertipSensor): Fingertip source
        loop (TapDetectionLoop): Detector
        indicator (FrameOverlayIndicator): Tap indicator
        stop_event (threading.Event): Shutdown flag
        headless (bool): Skip display and keyboard handling
    """
    while not stop_event.is_set():
        ret, frame = cap.read()
        if not ret:
            logger.error("Failed to read frame from camera, stopping")
            break

        # Mirrored input keeps MediaPipe handedness labels correct
        frame = cv.flip(frame, 1)
        sensor.update(frame)
        loop.tick()

        if headless:
            continue

        display = indicator.draw(frame)
        if loop.last_confidence is not None:
            cv.putText(display, f"Confidence: {loop.last_confidence:.2f}", (10, 30),
                       cv.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 2)
        cv.imshow(CameraConfig.WINDOW_NAME, display)

        if cv.waitKey(1) & 0xFF == ord('q'):
            stop_event.set()


def cleanup(cap, sensor, loop, headless=False):
    """
    Release every resource, whatever state the main loop ended in.

    Args:
        cap: Camera capture object
        sensor (MediaPipeFingertipSensor): Fingertip source
        loop (TapDetectionLoop): Detector, may be None if startup failed
        headless (bool): Whether a display window was used
    """
    logger.info("Cleaning up resources...")
    if loop is not None:
        loop.close()
    sensor.close()
    cap.release()
    if not headless:
        cv.destroyAllWindows()
    logger.info("Cleanup complete")


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    headless = args.headless or CameraConfig.HEADLESS
    cap = setup_camera(args.camera)
    sensor = MediaPipeFingertipSensor()
    indicator = FrameOverlayIndicator()
    loop = None

    stop_event = threading.Event()
    setup_signal_handler(stop_event)

    try:
        loop = build_loop(args, sensor, indicator)
        if not headless:
            logger.info("Controls: 'q'=quit")
        run_main_loop(cap, sensor, loop, indicator, stop_event, headless=headless)
    except ModelLoadError as e:
        logger.error(f"Could not load tap model: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")
    finally:
        cleanup(cap, sensor, loop, headless=headless)
    return 0


if __name__ == "__main__":
    sys.exit(main())
