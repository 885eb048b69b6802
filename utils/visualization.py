"""
Charts and tables: Gantt charts, policy comparison and statistics table
"""

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from typing import List, Dict, Optional
from core.dispatcher import GanttEntry


class Visualizer:
    """Scheduling result rendering"""

    def __init__(self):
        self.colors = plt.cm.Set3.colors

    def draw_gantt_chart(self, gantt_data: List[GanttEntry], algorithm_name: str,
                         save_path: Optional[str] = None, show: bool = True):
        """
        Draw a Gantt chart of CPU execution

        Args:
            gantt_data: Gantt entries of one run
            algorithm_name: policy name used in the title
            save_path: image path (not saved when None)
            show: open a window
        """
        if not gantt_data:
            print(f"No Gantt chart data for {algorithm_name}")
            return

        fig, ax = plt.subplots(figsize=(16, 6))

        # one row per job, in order of first execution
        names = list(dict.fromkeys(entry.name for entry in gantt_data))
        name_to_y = {name: idx for idx, name in enumerate(names)}

        for entry in gantt_data:
            duration = entry.end_time - entry.start_time
            y_pos = name_to_y[entry.name]
            color = self.colors[y_pos % len(self.colors)]

            ax.barh(y_pos, duration, left=entry.start_time, height=0.8,
                    color=color, edgecolor='black', linewidth=0.5)

            if duration > 1:
                ax.text(entry.start_time + duration/2, y_pos, entry.name,
                        ha='center', va='center', fontsize=8, fontweight='bold')

        ax.set_yticks(range(len(names)))
        ax.set_yticklabels(names)
        ax.set_xlabel('Time', fontsize=12)
        ax.set_ylabel('Job', fontsize=12)
        ax.set_title(f'Gantt Chart - {algorithm_name}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)
        ax.legend(handles=[mpatches.Patch(color=self.colors[0], label='Running')], loc='upper right')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Gantt chart saved to {save_path}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def compare_algorithms(self, results: List[Dict], save_path: Optional[str] = None, show: bool = True):
        """
        Bar charts of average wait and turnaround per policy

        Args:
            results: result dictionaries of each run
            save_path: image path
            show: open a window
        """
        if not results:
            print("No results to compare")
            return

        algorithms = [r['algorithm'] for r in results]
        avg_waiting_times = [r['statistics']['avg_waiting_time'] for r in results]
        avg_turnaround_times = [r['statistics']['avg_turnaround_time'] for r in results]

        fig, axes = plt.subplots(1, 2, figsize=(16, 7))
        fig.suptitle('Scheduling Policies Comparison', fontsize=16, fontweight='bold')

        panels = [
            (axes[0], avg_waiting_times, 'skyblue', 'Average Waiting Time'),
            (axes[1], avg_turnaround_times, 'lightcoral', 'Average Turnaround Time'),
        ]
        for ax, values, color, label in panels:
            bars = ax.bar(range(len(algorithms)), values, color=color, edgecolor='black')
            ax.set_xticks(range(len(algorithms)))
            ax.set_xticklabels(algorithms, rotation=45, ha='right', fontsize=9)
            ax.set_ylabel(label, fontsize=11)
            ax.set_title(f'{label} Comparison', fontsize=12, fontweight='bold')
            ax.grid(axis='y', alpha=0.3)

            for bar, value in zip(bars, values):
                height = bar.get_height()
                ax.text(bar.get_x() + bar.get_width()/2., height,
                        f'{value:.2f}', ha='center', va='bottom', fontsize=9)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Comparison chart saved to {save_path}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def print_statistics_table(self, results: List[Dict]):
        print("\n" + "="*110)
        print("Scheduling policy comparison")
        print("="*110)
        print(f"{'Policy':<40} {'Avg wait':>10} {'Avg turnaround':>15} {'CPU util(%)':>12} "
              f"{'Switches':>9} {'Preempts':>9}")
        print("-"*110)

        for result in results:
            algo = result['algorithm']
            stats = result['statistics']
            print(f"{algo:<40} "
                  f"{stats['avg_waiting_time']:>10.2f} "
                  f"{stats['avg_turnaround_time']:>15.2f} "
                  f"{stats['cpu_utilization']:>12.2f} "
                  f"{stats['context_switches']:>9} "
                  f"{stats['preemptions']:>9}")

        print("="*110 + "\n")

    def print_record_details(self, result: Dict):
        """Completion records of one run, in completion order"""
        print(f"\n{'='*60}")
        print(f"Completion records - {result['algorithm']}")
        print(f"{'='*60}")
        print(f"{'Name':<8} {'Arrival':>8} {'Wait':>8} {'Completion':>12}")
        print(f"{'-'*60}")

        for record in result['records']:
            print(f"{record.name:<8} {record.arrival:>8} {record.wait:>8} {record.completion_tick:>12}")

        print(f"{'='*60}\n")
